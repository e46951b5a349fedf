from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from couchook.runner.attitude import Attitude
    from couchook.runner.nature import Nature


@runtime_checkable
class Qualifier(Protocol):
    """Controller hook invoked when its runner initiates."""

    def qualify(self, attitude: Attitude, details: Any) -> None: ...


@runtime_checkable
class Disqualifier(Protocol):
    """Controller hook invoked when its runner resets."""

    def disqualify(self) -> None: ...


class Runner(ABC):
    """
    Lifecycle contract of a plugin or application runner.

    Lifecycle: ``setup`` -> ``init`` -> (``reset`` -> ``init``)* -> ``dispose``.
    Repeated ``init`` or ``reset`` calls are no-ops.

    Once initiated a runner owns a ``nature`` (how others talk to it and hear
    from it) and an ``attitude`` (how its controller changes state).
    """

    nature: Nature | None
    attitude: Attitude | None

    @abstractmethod
    def setup(self, controller: Any = None, resource: Any = None) -> Runner:
        """
        Prepare the runner with its controller and a resource description.

        Args:
            controller: Plugin or application controller
            resource: Mapping or object with traits, states, initial_state (and events)

        Returns:
            The runner itself
        """
        ...

    @abstractmethod
    def init(self, details: Any = None) -> Runner:
        """
        Initiate or re-initiate the runner.

        Args:
            details: Passed to the controller's ``qualify`` hook

        Returns:
            The runner itself
        """
        ...

    @abstractmethod
    def reset(self) -> Runner:
        """Return to the configured, not initiated state; a later ``init`` reuses the setup."""
        ...

    @abstractmethod
    def dispose(self) -> Runner:
        """Reset and release everything. The runner cannot be initiated again."""
        ...

    @property
    @abstractmethod
    def initiated(self) -> bool: ...


def qualify(controller: Any, attitude: Attitude, details: Any) -> None:
    if isinstance(controller, Qualifier) and callable(controller.qualify):
        controller.qualify(attitude, details)


def disqualify(controller: Any) -> None:
    if isinstance(controller, Disqualifier) and callable(controller.disqualify):
        controller.disqualify()
