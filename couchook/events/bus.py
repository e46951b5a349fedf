"""Synchronous event bus with priorities, one-shot listeners, wildcard and pattern types."""

from __future__ import annotations

import inspect
import re
import types
from dataclasses import dataclass
from typing import Any, Callable, Union

WILDCARD = "*"

EventType = Union[str, "re.Pattern[str]"]
Listener = Callable[..., Any]


@dataclass(frozen=True)
class EventMeta:
    """Second listener argument: the bus that dispatched and the dispatched type."""

    target: EventBus
    type: str


@dataclass(eq=False)
class ListenerRecord:
    key: str
    listener: Listener
    scope: Any = None
    priority: float = 0
    once: bool = False
    pattern: bool = False

    def invoke(self, payload: Any, meta: EventMeta) -> None:
        fn = self.listener
        if self.scope is not None and not inspect.ismethod(fn):
            fn = types.MethodType(fn, self.scope)
        fn(payload, meta)


class EventBus:
    """Event bus keyed by exact type, the wildcard ``"*"`` or a compiled regular expression.

    Listeners of a type are kept sorted by ascending priority; equal priorities
    keep their registration order. A dispatch invokes exact listeners, then
    wildcard listeners, then every pattern bucket whose expression matches.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[ListenerRecord]] = {}
        self._pattern_listeners: dict[str, list[ListenerRecord]] = {}

    def on(
        self,
        event_type: EventType | None,
        listener: Listener | None,
        scope: Any = None,
        priority: float = 0,
    ) -> EventBus:
        """
        Register ``listener(payload, meta)`` for ``event_type``.

        ``scope`` becomes the first argument of a plain function listener;
        bound methods already carry their receiver and ignore it.
        """
        if not event_type or listener is None:
            return self
        self._add_listener(event_type, listener, scope, priority, once=False)
        return self

    def once(
        self,
        event_type: EventType | None,
        listener: Listener | None,
        scope: Any = None,
        priority: float = 0,
    ) -> EventBus:
        if not event_type or listener is None:
            return self
        self._add_listener(event_type, listener, scope, priority, once=True)
        return self

    def off(self, event_type: EventType | None, listener: Listener | None) -> EventBus:
        if not event_type or listener is None:
            return self
        registry, key = self._registry_for(event_type)
        records = registry.get(key, [])
        for i, record in enumerate(records):
            if record.listener == listener:
                del records[i]
                if not records:
                    del registry[key]
                break
        return self

    def dispatch(self, event_type: str | None, payload: Any = None) -> bool:
        """Invoke every listener for ``event_type``; True if at least one fired."""
        if not event_type:
            return False

        records = list(self._listeners.get(event_type, []))
        records += self._listeners.get(WILDCARD, [])
        for expression, bucket in list(self._pattern_listeners.items()):
            if re.search(expression, event_type):
                records += bucket

        meta = EventMeta(target=self, type=event_type)
        for record in records:
            record.invoke(payload if payload is not None else {}, meta)
            if record.once:
                self._remove_record(record)

        return len(records) > 0

    def has_listener(self, event_type: EventType | None) -> bool:
        if not event_type:
            return False
        registry, key = self._registry_for(event_type)
        return len(registry.get(key, [])) > 0

    def _registry_for(self, event_type: EventType) -> tuple[dict[str, list[ListenerRecord]], str]:
        if isinstance(event_type, re.Pattern):
            return self._pattern_listeners, event_type.pattern
        return self._listeners, event_type

    def _add_listener(
        self,
        event_type: EventType,
        listener: Listener,
        scope: Any,
        priority: float,
        once: bool,
    ) -> None:
        registry, key = self._registry_for(event_type)
        records = registry.setdefault(key, [])
        if any(record.listener == listener for record in records):
            return
        records.append(
            ListenerRecord(
                key=key,
                listener=listener,
                scope=scope,
                priority=priority or 0,
                once=once,
                pattern=registry is self._pattern_listeners,
            )
        )
        # list.sort is stable, equal priorities keep insertion order
        records.sort(key=lambda record: record.priority)

    def _remove_record(self, record: ListenerRecord) -> None:
        registry = self._pattern_listeners if record.pattern else self._listeners
        records = registry.get(record.key)
        if records and record in records:
            records.remove(record)
            if not records:
                del registry[record.key]
