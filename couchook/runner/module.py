"""Module - leaf runner controlling exactly one plugin or application controller."""

from __future__ import annotations

import logging
from typing import Any

from couchook.composite import Component
from couchook.config import RunnerSettings
from couchook.runner.attitude import Attitude, State
from couchook.runner.base import Runner, disqualify, qualify
from couchook.runner.nature import Nature

logger = logging.getLogger(__name__)


class Module(Component, Runner):
    """
    Leaf runner.

    Attitude transitions are dispatched through the module's nature with the
    state name as event type and the state as payload.

    Example:
        class Controller:
            def qualify(self, attitude, details):
                attitude.current_state.start()

        module = Module("player").setup(Controller(), {"states": {"start": []}})
        module.init()
        module.attitude.current_state.name  # "start"
    """

    def __init__(self, module_id: str | None = None) -> None:
        super().__init__(module_id)
        self._settings: RunnerSettings | None = None
        self._controller: Any = None
        self._initiated = False
        self.nature: Nature | None = None
        self.attitude: Attitude | None = None

    @property
    def initiated(self) -> bool:
        return self._initiated

    @property
    def controller(self) -> Any:
        return self._controller

    def setup(self, controller: Any = None, resource: Any = None) -> Module:
        if resource is not None:
            self._settings = RunnerSettings.from_resource(resource)
        self._controller = controller
        return self

    def init(self, details: Any = None) -> Module:
        if self._initiated:
            return self

        settings = self._settings or RunnerSettings()
        if self.nature is None:
            self.nature = Nature(self.id)
        if self.attitude is None:
            self.attitude = Attitude(self._notify)

        self.nature.controller = self._controller
        self.attitude.set_states(settings.states, settings.initial_state)
        for trait in settings.traits:
            self.nature.add_trait(trait)

        qualify(self._controller, self.attitude, details)
        self._initiated = True
        logger.debug("Module %s initiated in state %s", self.id, self.attitude.current_state.name)
        return self

    def reset(self) -> Module:
        if not self._initiated:
            return self

        for trait in (self._settings or RunnerSettings()).traits:
            self.nature.remove_trait(trait)
        self.attitude.unset_states()
        disqualify(self._controller)
        self._initiated = False
        logger.debug("Module %s reset", self.id)
        return self

    def dispose(self) -> Module:
        self.reset()
        self.nature = None
        self.attitude = None
        self._settings = None
        self._controller = None
        super().dispose()
        logger.debug("Module %s disposed", self.id)
        return self

    def _notify(self, state: State) -> None:
        self.nature.dispatch(state.name, state)
