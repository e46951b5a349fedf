"""Memo of resolved event routes, keyed by (origin, event type)."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from couchook.events import EventMeta
from couchook.runner.nature import Nature

RouteKey = tuple[str, str]


@dataclass(frozen=True)
class RouteTarget:
    """A resolved destination: the nature reached by the path and the callable found on it."""

    nature: Nature
    function: Callable[..., Any]

    def __call__(self, payload: Any, meta: EventMeta) -> None:
        self.function(payload, meta)


class EventRouteCache:
    """Route lists per key. Entries are only ever dropped all at once."""

    def __init__(self) -> None:
        self._routes: dict[RouteKey, list[RouteTarget]] = {}

    def get(self, key: RouteKey) -> list[RouteTarget] | None:
        return self._routes.get(key)

    def set(self, key: RouteKey, targets: list[RouteTarget]) -> EventRouteCache:
        self._routes[key] = targets
        return self

    def expire(self) -> EventRouteCache:
        self._routes = {}
        return self

    def keys(self) -> list[RouteKey]:
        return list(self._routes)

    def __contains__(self, key: object) -> bool:
        return key in self._routes

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[RouteKey]:
        return iter(list(self._routes))
