"""Attitude - the state machine of a runner."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

STATELESS = "stateless"

NotifyFn = Callable[["State"], None]
TransitionFn = Callable[..., bool]


def merge_detail(base: Mapping[str, Any] | None, detail: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Merge ``detail`` into a copy of ``base``.

    Nested mappings merge key by key into fresh dicts. Any other value is kept
    by reference, so live objects (locks, connections, controllers) pass through.
    """
    result: dict[str, Any] = {}
    for source in (base, detail):
        for key, value in (source or {}).items():
            if isinstance(value, Mapping):
                current = result.get(key)
                result[key] = merge_detail(current if isinstance(current, Mapping) else None, value)
            else:
                result[key] = value
    return result


class State:
    """
    A named state of an attitude.

    Besides ``name`` and ``detail`` a state exposes one transition function per
    known state name, reachable as an attribute (``state.play()``) or by key
    (``state["play"]()``) for names that clash with the state's own fields.
    Each function takes an optional detail mapping and returns True only for a
    legal transition to another state.
    """

    __slots__ = ("name", "detail", "_transitions")

    def __init__(self, name: str) -> None:
        self.name = name
        self.detail: dict[str, Any] | None = None
        self._transitions: dict[str, TransitionFn] = {}

    @property
    def transition_names(self) -> list[str]:
        return list(self._transitions)

    def __getitem__(self, state_name: str) -> TransitionFn:
        return self._transitions[state_name]

    def __contains__(self, state_name: object) -> bool:
        return state_name in self._transitions

    def __getattr__(self, state_name: str) -> TransitionFn:
        if state_name.startswith("_"):
            raise AttributeError(state_name)
        try:
            return self._transitions[state_name]
        except KeyError:
            raise AttributeError(
                f"State {self.name!r} has no transition {state_name!r}"
            ) from None

    def __repr__(self) -> str:
        return f"State({self.name!r}, detail={self.detail!r})"


class Attitude:
    """
    State machine of a runner.

    The transition map lists, per state, the states it may change to. The
    initial state is always a legal destination, and when the initial state
    declares no destinations of its own it may change to every known state.

    Calling a transition of the current state to itself updates the detail and
    notifies, but returns False because no transition took place.

    Example:
        attitude = Attitude(None, {"play": ["pause"], "pause": ["play", "stop"], "stop": ["play"]})
        attitude.current_state.play({"url": "video.mp4"})  # True
        attitude.current_state.stop()                      # False, still "play"
        attitude.current_state.pause()                     # True
        attitude.current_state.stop()                      # True
    """

    def __init__(
        self,
        notify: NotifyFn | None = None,
        transitions: Mapping[str, list[str]] | None = None,
        initial_state: str | None = None,
    ) -> None:
        self._notify_fn = notify
        self._transitions: dict[str, list[str]] = {}
        self._states: dict[str, State] = {}
        self.current_state: State
        self.set_states(transitions, initial_state)

    @property
    def state_names(self) -> list[str]:
        return list(self._states)

    def get_state(self, state_name: str) -> State | None:
        return self._states.get(state_name)

    def destinations(self, state_name: str) -> list[str]:
        return list(self._transitions.get(state_name, []))

    def can_change(self, state_name: str) -> bool:
        return (
            self.has_state(state_name)
            and state_name != self.current_state.name
            and state_name in self._transitions.get(self.current_state.name, [])
        )

    def has_state(self, state_name: str) -> bool:
        return state_name in self._states

    def unset_states(self) -> None:
        """Drop every state and collapse to the stateless initial state."""
        self._transitions = {}
        self._states = {}
        self.set_states()

    def set_states(
        self,
        transitions: Mapping[str, list[str]] | None = None,
        initial_state: str | None = None,
    ) -> None:
        initial = initial_state or STATELESS
        table: dict[str, list[str]] = {
            name: list(dest or []) for name, dest in (transitions or {}).items()
        }
        if initial not in table:
            table[initial] = []

        names: list[str] = [initial]
        for name, dest in table.items():
            for candidate in [name, *dest]:
                if candidate not in names:
                    names.append(candidate)

        open_initial = not [name for name in table[initial] if name != initial]
        for name in names:
            dest = table.setdefault(name, [])
            if initial not in dest:
                dest.append(initial)
        if open_initial:
            table[initial] = list(names)

        self._transitions = table
        self._states = {name: self._build_state(name, names) for name in names}
        self.current_state = self._states[initial]

    def _build_state(self, name: str, names: list[str]) -> State:
        state = State(name)
        allowed = self._transitions[name]
        for target in names:
            if target == name:
                state._transitions[target] = self._detail_update(target)
            elif target in allowed:
                state._transitions[target] = self._transition(target)
            else:
                state._transitions[target] = _refuse
        return state

    def _detail_update(self, target: str) -> TransitionFn:
        def update(detail: Mapping[str, Any] | None = None) -> bool:
            self._change(target, detail)
            return False

        return update

    def _transition(self, target: str) -> TransitionFn:
        def change(detail: Mapping[str, Any] | None = None) -> bool:
            return self._change(target, detail)

        return change

    def _change(self, state_name: str, detail: Mapping[str, Any] | None) -> bool:
        target = self._states.get(state_name)
        if target is None:
            # transition function of a state table that was replaced since
            return False
        base = target.detail if target.detail is not None else self.current_state.detail
        target.detail = merge_detail(base, detail)
        self.current_state = target
        if self._notify_fn is not None:
            self._notify_fn(target)
        return True


def _refuse(detail: Mapping[str, Any] | None = None) -> bool:
    return False
