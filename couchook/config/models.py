"""
Runner configuration models

Pydantic models describing how a runner is set up. ``RunnerSettings`` is what a
runner keeps after ``setup``; ``ResourceSpec`` is the plain-data form of a whole
resource tree.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from couchook.errors import ConfigurationError

Trait = dict[str, Callable[..., Any]]
Transitions = dict[str, list[str]]
EventMap = dict[str, dict[str, list[str]]]


def _read(resource: Any, name: str) -> Any:
    if isinstance(resource, Mapping):
        return resource.get(name)
    return getattr(resource, name, None)


class RunnerSettings(BaseModel):
    """Settings copied into a runner by ``setup``"""

    model_config = ConfigDict(extra="ignore")

    traits: list[Trait] = Field(default_factory=list, description="Trait functions for the nature")
    states: Transitions | None = Field(None, description="State name -> allowed destinations")
    initial_state: str | None = Field(None, description="Initial attitude state")
    events: EventMap | None = Field(None, description="Origin -> event type -> dotted targets")

    @classmethod
    def from_resource(cls, resource: Any = None) -> RunnerSettings:
        """
        Build settings from a mapping, a model or any object with matching attributes.

        Every container is copied, so later changes to ``resource`` do not reach
        the runner. Trait callables are shared.

        Raises:
            ConfigurationError: if the resource does not validate
        """
        if resource is None:
            return cls()

        traits = _read(resource, "traits")
        states = _read(resource, "states")
        events = _read(resource, "events")
        try:
            return cls(
                traits=[dict(trait) for trait in traits] if traits else [],
                states={name: list(dest) for name, dest in states.items()}
                if states is not None
                else None,
                initial_state=_read(resource, "initial_state"),
                events={
                    origin: {event: list(paths) for event, paths in mapping.items()}
                    for origin, mapping in events.items()
                }
                if events is not None
                else None,
            )
        except (ValidationError, TypeError, AttributeError) as e:
            raise ConfigurationError(f"Invalid runner settings: {e}", e) from e


class ResourceSpec(BaseModel):
    """Plain-data description of a runner and its subordinated runners"""

    model_config = ConfigDict(extra="ignore", arbitrary_types_allowed=True)

    id: str = Field(..., description="Runner id")
    controller: Any = Field(None, description="Plugin or application controller")
    traits: list[Trait] | None = Field(None, description="Trait functions")
    states: Transitions | None = Field(None, description="Attitude transitions")
    events: EventMap | None = Field(None, description="Event routing map")
    initial_state: str | None = Field(None, description="Initial attitude state")
    force_container: bool = Field(False, description="Create a sandbox even without children")
    children: list[ResourceSpec] = Field(default_factory=list, description="Subordinated runners")


ResourceSpec.model_rebuild()
