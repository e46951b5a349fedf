"""RunnerFactory - chooses between Module and Sandbox for a resource."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from couchook.config import ResourceSpec
from couchook.factory import Factory
from couchook.runner.base import Runner
from couchook.runner.module import Module
from couchook.runner.sandbox import Sandbox


class SandboxHandler:
    """Creates a sandbox for resources with children or a forced container."""

    def can_handle(self, resource: ResourceSpec | None) -> bool:
        return bool(
            resource is not None
            and resource.id
            and (resource.children or resource.force_container)
        )

    def create(self, resource: ResourceSpec, artifact: Any = None) -> Sandbox:
        return Sandbox(resource.id).setup(resource.controller, resource)


class ModuleHandler:
    """Creates a module for any resource with an id."""

    def can_handle(self, resource: ResourceSpec | None) -> bool:
        return bool(resource is not None and resource.id)

    def create(self, resource: ResourceSpec, artifact: Any = None) -> Module:
        return Module(resource.id).setup(resource.controller, resource)


class RunnerFactory(Factory):
    """
    Factory of runners.

    A sandbox is created when the resource has children or ``force_container``
    is set; any other resource with an id becomes a module. Children are not
    created here; see ``CouchookApp.create``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.handler.add_child(SandboxHandler())
        self.handler.add_child(ModuleHandler())

    def create(self, resource: Any, artifact: Any = None) -> Runner | None:
        if isinstance(resource, Mapping):
            resource = ResourceSpec.model_validate(resource)
        return super().create(resource, artifact)
