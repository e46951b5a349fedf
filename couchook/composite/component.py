"""Ordered tree primitive: components with parent links and composites holding children."""

from __future__ import annotations

from typing import Union

ChildRef = Union["Component", str, int]


class Component:
    """A node that can be placed in a composite hierarchy."""

    def __init__(self, component_id: str | None = None, is_root: bool = False) -> None:
        self._id = component_id
        self._parent: Composite | None = None
        self._is_root = is_root

    @property
    def id(self) -> str | None:
        return self._id

    def get_parent(self) -> Composite | None:
        return self._parent

    def get_root(self) -> Component | None:
        # Walked on every call; parent links are the only source of truth.
        if self._is_root:
            return self
        if self._parent is not None:
            return self._parent.get_root()
        return None

    def set_parent(self, value: Composite | None = None) -> None:
        self._parent = value

    def is_container(self) -> bool:
        return False

    def is_root(self) -> bool:
        return self._is_root

    def dispose(self) -> None:
        self.set_parent(None)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._id!r})"


class Composite(Component):
    """A component holding an ordered sequence of subordinated components."""

    def __init__(self, component_id: str | None = None, is_root: bool = False) -> None:
        super().__init__(component_id, is_root)
        self._children: list[Component] = []

    @property
    def children(self) -> list[Component]:
        return list(self._children)

    def is_container(self) -> bool:
        return True

    def num_children(self) -> int:
        return len(self._children)

    def get_depth(self) -> int:
        depth = max(
            (child.get_depth() for child in self._children if isinstance(child, Composite)),
            default=0,
        )
        return (1 if self._children else 0) + depth

    def index_of(self, child: Component, from_index: int = 0) -> int:
        for i in range(max(from_index, 0), len(self._children)):
            if self._children[i] is child:
                return i
        return -1

    def last_index_of(self, child: Component, from_index: int | None = None) -> int:
        start = len(self._children) - 1 if from_index is None else min(from_index, len(self._children) - 1)
        for i in range(start, -1, -1):
            if self._children[i] is child:
                return i
        return -1

    def get_child(self, child_id: str | int, deep: bool = False) -> Component | None:
        """Find a child by id (optionally through nested composites) or by index."""
        if isinstance(child_id, str):
            if self._id == child_id:
                return self
            for child in self._children:
                if child.id == child_id:
                    return child
                if deep and isinstance(child, Composite):
                    found = child.get_child(child_id, deep)
                    if found is not None:
                        return found
            return None
        if isinstance(child_id, int) and 0 <= child_id < len(self._children):
            return self._children[child_id]
        return None

    def add_child(self, child: Component | None, index: int | None = None) -> Composite:
        if child is not None:
            length = len(self._children)
            position = length if index is None else max(0, min(length, index))
            self._children.insert(position, child)
            child.set_parent(self)
        return self

    def remove_child(self, child: ChildRef | None, deep: bool = False) -> Component | None:
        if isinstance(child, (str, int)):
            child = self.get_child(child, deep)
        if child is None:
            return None

        for i, candidate in enumerate(list(self._children)):
            if candidate is child:
                del self._children[i]
                candidate.set_parent(None)
                break
            if deep and isinstance(candidate, Composite):
                candidate.remove_child(child, deep)
        return child

    def dispose(self) -> None:
        self.set_parent(None)
        while self._children:
            child = self._children[0]
            child.dispose()
            self.remove_child(child, True)
