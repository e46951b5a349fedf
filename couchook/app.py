"""CouchookApp - resources plus a runner factory, building runner trees on demand."""

from __future__ import annotations

import logging

from couchook.config import ResourceSpec
from couchook.errors import ResourceError
from couchook.runner import Runner, RunnerFactory, RunnerResource, Sandbox

logger = logging.getLogger(__name__)


class CouchookApp:
    """
    Entry point for building applications out of decoupled plugins.

    Each plugin runs in its own runner. Runners are described up front in
    ``resources`` and created with ``create``; subordinated resources become
    child runners of a sandbox.

    Example:
        app = CouchookApp()
        app.resources.import_resource({
            "id": "player",
            "controller": PlayerController(),
            "traits": [{"play": lambda self: self.controller.play()}],
            "states": {"playing": []},
        })
        runner = app.create("player").init()
        runner.nature.play()
    """

    def __init__(self) -> None:
        self.resources = RunnerResource("root", is_root=True)
        self.factory = RunnerFactory()

    def create(self, runner_id: str | None, force_container: bool = False) -> Runner | None:
        """
        Create the runner (and its subordinated runners) for ``runner_id``.

        An unknown id is added to ``resources`` as an empty resource first.

        Args:
            runner_id: Id of the resource to create a runner for
            force_container: Create a sandbox even when the resource has no children

        Raises:
            ResourceError: if ``runner_id`` is empty or names the resource root
        """
        if not runner_id:
            raise ResourceError("Runner id not defined")

        detail = self.resources.get_child(runner_id, deep=True)
        if detail is self.resources:
            raise ResourceError(f"'{runner_id}' is the resource root", runner_id)
        if not isinstance(detail, RunnerResource):
            detail = self.resources.add_resource(runner_id)
        detail.force_container = force_container
        runner = self._resolve(detail.to_spec())
        logger.debug("Created %s for resource %s", type(runner).__name__, runner_id)
        return runner

    def _resolve(self, spec: ResourceSpec) -> Runner | None:
        runner = self.factory.create(spec)
        if isinstance(runner, Sandbox):
            for child_spec in spec.children:
                child = self._resolve(child_spec)
                if child is not None:
                    runner.add_child(child)
        return runner
