"""
Couchook - composing decoupled plugins into a controllable runner hierarchy
===========================================================================

Every plugin or application controller runs inside a runner:

- **Module**: a leaf runner around one controller.
- **Sandbox**: a runner that owns child runners and routes their events.

A runner exposes two faces:

- ``runner.nature``: an event bus carrying the runner's traits. Others call
  ``nature.load()`` or ``sandbox.nature.child.load()`` and listen with
  ``nature.on("loaded", listener)``.
- ``runner.attitude``: the state machine handed to the controller in
  ``qualify(attitude, details)``. Each transition is dispatched on the nature.

A sandbox's event map wires one runner's events to another runner's traits::

    {"loader": {"loaded": ["player.play"]}}
"""

from couchook.app import CouchookApp
from couchook.config import ResourceSpec, RunnerSettings
from couchook.errors import (
    ConfigurationError,
    CouchookError,
    FactoryItemError,
    InvalidRunnerError,
    ResourceError,
    RouteResolutionError,
)
from couchook.events import EventBus, EventMeta
from couchook.runner import (
    Attitude,
    EventRouteCache,
    Module,
    Nature,
    Runner,
    RunnerFactory,
    RunnerResource,
    Sandbox,
    State,
)

__version__ = "0.1.0"

__all__ = [
    "CouchookApp",
    "EventBus",
    "EventMeta",
    "Attitude",
    "State",
    "Nature",
    "Runner",
    "Module",
    "Sandbox",
    "EventRouteCache",
    "RunnerFactory",
    "RunnerResource",
    "RunnerSettings",
    "ResourceSpec",
    "CouchookError",
    "ConfigurationError",
    "RouteResolutionError",
    "InvalidRunnerError",
    "FactoryItemError",
    "ResourceError",
]
