"""RunnerResource - declarative tree of runner descriptions."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from couchook.composite import Composite
from couchook.config import ResourceSpec
from couchook.errors import ConfigurationError, ResourceError


class RunnerResource(Composite):
    """
    Everything needed to create a runner, arranged as a composite so whole
    runner hierarchies can be described up front.

    Example:
        resources = RunnerResource("root", is_root=True)
        resources.import_resource({
            "id": "negotiator",
            "events": {"invoker": {"load": ["receiver.on_load"]}},
            "children": [{"id": "invoker", "states": {"load": []}}, {"id": "receiver"}],
        })
        resources.get_child("receiver", deep=True)
    """

    def __init__(self, resource_id: str | None = None, is_root: bool = False) -> None:
        super().__init__(resource_id, is_root)
        self.controller: Any = None
        self.traits: list[dict[str, Callable[..., Any]]] | None = None
        self.states: dict[str, list[str]] | None = None
        self.events: dict[str, dict[str, list[str]]] | None = None
        self.initial_state: str | None = None
        self.force_container = False

    def add_resource(
        self,
        resource_id: str | None,
        controller: Any = None,
        traits: list[dict[str, Callable[..., Any]]] | None = None,
        states: dict[str, list[str]] | None = None,
        events: dict[str, dict[str, list[str]]] | None = None,
        initial_state: str | None = None,
    ) -> RunnerResource:
        """
        Add a subordinated resource.

        Raises:
            ResourceError: if the id is missing or already used in this tree
        """
        if not resource_id:
            raise ResourceError("Resource id not defined")
        tree = self.get_root() or self
        if tree.get_child(resource_id, deep=True) is not None:
            raise ResourceError(f"Resource with the id '{resource_id}' already defined", resource_id)

        detail = RunnerResource(resource_id)
        detail.controller = controller
        detail.traits = traits
        detail.states = states
        detail.events = events
        detail.initial_state = initial_state
        self.add_child(detail)
        return detail

    def import_resource(self, detail: ResourceSpec | Mapping[str, Any] | None) -> RunnerResource | None:
        """Add ``detail`` and, recursively, its children."""
        if detail is None:
            return None
        if not isinstance(detail, ResourceSpec):
            try:
                detail = ResourceSpec.model_validate(detail)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid resource: {e}", e) from e

        result = self.add_resource(
            detail.id,
            detail.controller,
            detail.traits,
            detail.states,
            detail.events,
            detail.initial_state,
        )
        result.force_container = detail.force_container
        for child in detail.children:
            result.import_resource(child)
        return result

    def to_spec(self) -> ResourceSpec:
        return ResourceSpec(
            id=self.id,
            controller=self.controller,
            traits=self.traits,
            states=self.states,
            events=self.events,
            initial_state=self.initial_state,
            force_container=self.force_container,
            children=[child.to_spec() for child in self.children if isinstance(child, RunnerResource)],
        )

    def to_object(self) -> dict[str, Any]:
        """Export as plain data, leaving out empty fields."""
        detail: dict[str, Any] = {"id": self.id}
        if self.controller is not None:
            detail["controller"] = self.controller
        for name in ("traits", "states", "events", "initial_state", "force_container"):
            value = getattr(self, name)
            if value:
                detail[name] = value
        children = [child for child in self.children if isinstance(child, RunnerResource)]
        if children:
            detail["children"] = [child.to_object() for child in children]
        return detail
