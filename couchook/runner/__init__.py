"""
Runners - lifecycle-managed units binding a controller to a nature and an attitude
"""

from couchook.runner.attitude import STATELESS, Attitude, State
from couchook.runner.base import Disqualifier, Qualifier, Runner
from couchook.runner.cache import EventRouteCache, RouteKey, RouteTarget
from couchook.runner.factory import ModuleHandler, RunnerFactory, SandboxHandler
from couchook.runner.module import Module
from couchook.runner.nature import Nature
from couchook.runner.resource import RunnerResource
from couchook.runner.sandbox import Sandbox

__all__ = [
    # State machine
    "Attitude",
    "State",
    "STATELESS",
    # Capabilities
    "Nature",
    # Runners
    "Runner",
    "Qualifier",
    "Disqualifier",
    "Module",
    "Sandbox",
    # Routing
    "EventRouteCache",
    "RouteKey",
    "RouteTarget",
    # Creation
    "RunnerFactory",
    "SandboxHandler",
    "ModuleHandler",
    "RunnerResource",
]
