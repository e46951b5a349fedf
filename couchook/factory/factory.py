"""
Factory - handler chain creating artifacts from resource descriptions

A factory walks its ``handler`` items in order; the first item that can handle
a resource creates the artifact. Every ``wrapper`` item that can handle the
same resource then wraps the artifact, in order.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterator
from typing import Any, Protocol, runtime_checkable

from couchook.composite import Component, Composite
from couchook.errors import FactoryItemError

logger = logging.getLogger(__name__)


@runtime_checkable
class Handler(Protocol):
    def can_handle(self, resource: Any) -> bool: ...

    def create(self, resource: Any, artifact: Any = None) -> Any: ...


class FactoryItem(Component):
    """
    A handler that can be placed in a ``FactoryItemCollection``.

    Args:
        can_handle: Decides whether this item can create from a resource
        create: Creates (or wraps) an artifact from the resource
        item_id: Component id inside the collection
    """

    def __init__(
        self,
        can_handle: Callable[[Any], bool],
        create: Callable[[Any, Any], Any],
        item_id: str | None = None,
    ) -> None:
        super().__init__(item_id)
        self._can_handle = can_handle
        self._create = create

    def can_handle(self, resource: Any) -> bool:
        return bool(self._can_handle(resource))

    def create(self, resource: Any, artifact: Any = None) -> Any:
        return self._create(resource, artifact)


class FactoryItemCollection(Composite):
    """Ordered collection of factory items; plain handlers are wrapped on insertion."""

    def __init__(self, collection_id: str, id_factory: Callable[[], str] | None = None) -> None:
        super().__init__(collection_id, is_root=True)
        if id_factory is None:
            counter = itertools.count()
            id_factory = lambda: f"{collection_id}-item{next(counter)}"  # noqa: E731
        self._next_id = id_factory

    def add_child(self, child: Any, index: int | None = None) -> FactoryItemCollection:
        """
        Add a handler.

        Raises:
            FactoryItemError: if ``child`` has no callable ``can_handle``/``create``
        """
        if isinstance(child, FactoryItem):
            super().add_child(child, index)
        elif isinstance(child, Handler) and callable(child.can_handle) and callable(child.create):
            super().add_child(FactoryItem(child.can_handle, child.create, self._next_id()), index)
        else:
            raise FactoryItemError(child)
        return self

    def __iter__(self) -> Iterator[FactoryItem]:
        return iter(self.children)  # type: ignore[arg-type]


class Factory:
    """
    Create artifacts through the ``handler`` chain and wrap them through ``wrapper``.

    Example:
        factory = Factory()
        factory.handler.add_child(JsonParserHandler())
        factory.wrapper.add_child(LoggingParserWrapper())
        parser = factory.create({"json": True})
    """

    def __init__(self) -> None:
        self.handler = FactoryItemCollection("handler")
        self.wrapper = FactoryItemCollection("wrapper")

    def create(self, resource: Any, artifact: Any = None) -> Any:
        """
        Create an artifact from ``resource``, or wrap ``artifact`` when one is given.

        Returns:
            The (wrapped) artifact, or None when no handler can create one
        """
        if artifact is not None:
            result = artifact
            for item in self.wrapper:
                if item.can_handle(resource):
                    result = item.create(resource, result)
            return result

        for item in self.handler:
            if item.can_handle(resource):
                created = item.create(resource, None)
                logger.debug("Factory item %s created %r", item.id, created)
                return None if created is None else self.create(resource, created)
        return None
