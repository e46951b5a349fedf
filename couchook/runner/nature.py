"""Nature - the event-capable, trait-composable identity of a runner."""

from __future__ import annotations

import types
from collections.abc import Callable, Mapping
from typing import Any

from couchook.events import EventBus


class Nature(EventBus):
    """
    Command centre of a runner.

    Traits are mappings of name -> function installed at runtime. An installed
    function is called with the nature as its first argument, so it can reach
    ``self.controller``, ``self.identity``, ``self.dispatch`` and other traits::

        nature = Nature("player")
        nature.add_trait({"log": lambda self, value: print(self.identity, value)})
        nature.log("hello")  # prints "player hello"

    A sandbox also attaches the natures of its children under their ids, which
    makes ``sandbox.nature.loader.load()`` possible. Traits and attached natures
    share one member table: the last writer of a name wins, and removing a
    name clears it without restoring an earlier value. Attribute access finds
    the nature's own attributes first, so a trait cannot shadow ``dispatch``;
    ``get_member`` reads the member table alone and is what event routes use.
    """

    def __init__(self, identity: str | None = None) -> None:
        super().__init__()
        self._identity = identity
        self._members: dict[str, Any] = {}
        self.controller: Any = None

    @property
    def identity(self) -> str | None:
        return self._identity

    @property
    def member_names(self) -> list[str]:
        return list(self._members)

    def add_trait(self, trait: Mapping[str, Callable[..., Any]]) -> None:
        for name, fn in trait.items():
            self._members[name] = fn

    def remove_trait(self, trait: Mapping[str, Callable[..., Any]]) -> None:
        for name in trait:
            self._members.pop(name, None)

    def has_trait(self, name: str) -> bool:
        return name in self._members and not isinstance(self._members[name], Nature)

    def get_trait(self, name: str) -> Callable[..., Any] | None:
        """Return the raw (unbound) function installed under ``name``."""
        member = self._members.get(name)
        return None if isinstance(member, Nature) else member

    def get_member(self, name: str) -> Any:
        """
        Look ``name`` up in the member table only: an attached nature as-is, a
        trait bound to this nature, or None. Unlike attribute access, members
        named like bus attributes (``controller``, ``on``, ``dispatch``) are found.
        """
        member = self._members.get(name)
        if member is None or isinstance(member, Nature):
            return member
        return types.MethodType(member, self)

    def attach(self, name: str, nature: Nature) -> None:
        self._members[name] = nature

    def detach(self, name: str) -> None:
        self._members.pop(name, None)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            member = self._members[name]
        except KeyError:
            raise AttributeError(
                f"Nature {self._identity!r} has no trait or namespace {name!r}"
            ) from None
        if isinstance(member, Nature):
            return member
        return types.MethodType(member, self)

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._members))

    def __repr__(self) -> str:
        return f"Nature({self._identity!r})"
