"""Sandbox - composite runner that routes events between its children."""

from __future__ import annotations

import logging
import math
from typing import Any

from couchook.composite import Component, Composite
from couchook.config import RunnerSettings
from couchook.errors import InvalidRunnerError, RouteResolutionError
from couchook.events import WILDCARD, EventMeta
from couchook.runner.attitude import Attitude, State
from couchook.runner.base import Runner, disqualify, qualify
from couchook.runner.cache import EventRouteCache, RouteKey, RouteTarget
from couchook.runner.nature import Nature

logger = logging.getLogger(__name__)

OWN_NATURE = "nature"


class Sandbox(Composite, Runner):
    """
    Composite runner.

    Every event dispatched by a child's nature reaches the sandbox. The sandbox
    looks the (origin id, event type) pair up in its event map, invokes the
    mapped destinations in declaration order, then re-dispatches the event on
    its own nature so that enclosing sandboxes see it too. Transitions of the
    sandbox's own attitude are routed the same way under the origin key
    ``"nature"``.

    Example:
        sandbox = Sandbox("negotiator")
        sandbox.add_child(Module("invoker").setup(None, {"states": {"start": []}}))
        sandbox.add_child(Module("receiver").setup(None, {"traits": [{"on_start": on_start}]}))
        sandbox.setup(None, {"events": {"invoker": {"start": ["receiver.on_start"]}}})
        sandbox.init()
        sandbox.get_child("invoker").attitude.current_state.start()  # calls on_start
    """

    def __init__(self, sandbox_id: str | None = None) -> None:
        super().__init__(sandbox_id, is_root=True)
        self._settings: RunnerSettings | None = None
        self._controller: Any = None
        self._initiated = False
        self.nature: Nature | None = None
        self.attitude: Attitude | None = None
        self.cache: EventRouteCache | None = None

    @property
    def initiated(self) -> bool:
        return self._initiated

    @property
    def controller(self) -> Any:
        return self._controller

    @property
    def event_map(self) -> dict[str, dict[str, list[str]]]:
        settings = self._settings
        return settings.events if settings is not None and settings.events else {}

    # ==================== Runner ====================

    def setup(self, controller: Any = None, resource: Any = None) -> Sandbox:
        if resource is not None:
            self._settings = RunnerSettings.from_resource(resource)
        self._controller = controller
        return self

    def init(self, details: Any = None) -> Sandbox:
        if self._initiated:
            return self

        settings = self._settings or RunnerSettings()
        if self.cache is None:
            self.cache = EventRouteCache()
        if self.nature is None:
            self.nature = Nature(self.id)
        if self.attitude is None:
            self.attitude = Attitude(self._notify)

        self.nature.controller = self._controller
        self.attitude.set_states(settings.states, settings.initial_state)
        for trait in settings.traits:
            self.nature.add_trait(trait)

        for child in self._runners():
            child.init(details)
            self._set_route(True, child)

        qualify(self._controller, self.attitude, details)
        self._initiated = True
        logger.debug("Sandbox %s initiated with %d children", self.id, self.num_children())
        return self

    def reset(self) -> Sandbox:
        if not self._initiated:
            return self

        for child in self._runners():
            self._set_route(False, child)
            child.reset()
        self.cache.expire()

        for trait in (self._settings or RunnerSettings()).traits:
            self.nature.remove_trait(trait)
        self.attitude.unset_states()
        disqualify(self._controller)
        self._initiated = False
        logger.debug("Sandbox %s reset", self.id)
        return self

    def dispose(self) -> Sandbox:
        self.reset()
        self.nature = None
        self.attitude = None
        self.cache = None
        self._settings = None
        self._controller = None
        super().dispose()
        logger.debug("Sandbox %s disposed", self.id)
        return self

    # ==================== Composite ====================

    def add_child(self, child: Component | None, index: int | None = None) -> Sandbox:
        """
        Add a runner. An initiated sandbox initiates and wires it before insertion.

        Raises:
            InvalidRunnerError: if ``child`` is not a runner
        """
        if child is None:
            return self
        if not isinstance(child, Runner):
            raise InvalidRunnerError(child)
        if self._initiated:
            child.init()
            self._set_route(True, child)
        super().add_child(child, index)
        return self

    def remove_child(self, child: Any, deep: bool = False) -> Component | None:
        """Remove a runner given itself, its id or its index; returns it or None."""
        if not isinstance(child, Runner):
            child = self.get_child(child, deep)
        if child is None or child is self:
            return None

        if self.index_of(child) >= 0:
            self._set_route(False, child)
        child.reset()
        return super().remove_child(child, deep)

    # ==================== Routing ====================

    def _runners(self) -> list[Runner]:
        return [child for child in self._children if isinstance(child, Runner)]

    def _set_route(self, enable: bool, child: Runner) -> None:
        child_nature = child.nature
        nature = self.nature
        if child_nature is None or nature is None:
            return

        if enable:
            child_nature.on(WILDCARD, self._handle_event, priority=math.inf)
            nature.attach(child.id, child_nature)
            logger.debug("Sandbox %s routes %s", self.id, child.id)
        else:
            child_nature.off(WILDCARD, self._handle_event)
            nature.detach(child.id)
            logger.debug("Sandbox %s unroutes %s", self.id, child.id)

    def _notify(self, state: State) -> None:
        self._handle_event(state, EventMeta(target=self.nature, type=state.name))

    def _handle_event(self, payload: Any, meta: EventMeta) -> None:
        self._resolve_destinations(payload, meta)
        self.nature.dispatch(meta.type, payload)

    def _resolve_destinations(self, payload: Any, meta: EventMeta) -> None:
        origin = meta.target.identity
        if origin == self.id:
            origin = OWN_NATURE
        key: RouteKey = (origin, meta.type)

        targets = self.cache.get(key) if self.cache is not None else None
        if targets is None:
            paths = self.event_map.get(origin, {}).get(meta.type)
            if paths:
                targets = self._update_cache(key, paths)

        for target in targets or []:
            target(payload, meta)

    def _update_cache(self, key: RouteKey, paths: list[str]) -> list[RouteTarget]:
        targets = [self._resolve_path(path) for path in paths]
        if self.cache is not None:
            self.cache.set(key, targets)
        logger.debug("Sandbox %s cached %d route(s) for %s", self.id, len(targets), key)
        return targets

    def _resolve_path(self, path: str) -> RouteTarget:
        """Walk a dotted path like ``"child.method"`` from the sandbox's own nature."""
        *namespaces, name = path.split(".")
        context: Any = self.nature
        for segment in namespaces:
            context = _lookup(context, segment)
            if not isinstance(context, Nature):
                raise RouteResolutionError(path, segment)
        function = _lookup(context, name)
        if not callable(function):
            raise RouteResolutionError(path, name)
        return RouteTarget(nature=context, function=function)


def _lookup(nature: Nature, name: str) -> Any:
    # members first: a child id may equal a bus attribute such as "controller"
    member = nature.get_member(name)
    if member is not None:
        return member
    return getattr(nature, name, None)
