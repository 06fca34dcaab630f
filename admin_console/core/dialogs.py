"""
Dialog state machines.

Each screen owns one machine whose state is a single tagged value (pydantic
models discriminated by `state`), so two dialogs can never be open together.
Screen-specific states and transitions live beside each module's controller.
"""

import logging
from typing import Literal

from pydantic import BaseModel

from admin_console.core.errors import DialogTransitionError

logger = logging.getLogger(__name__)


class Idle(BaseModel):
    state: Literal["idle"] = "idle"


class DialogMachine:
    def __init__(self):
        self._state: BaseModel = Idle()

    @property
    def state(self) -> BaseModel:
        return self._state

    @property
    def is_idle(self) -> bool:
        return isinstance(self._state, Idle)

    def _require(self, *allowed: type, action: str) -> None:
        if not isinstance(self._state, allowed):
            raise DialogTransitionError(self._state.state, action)

    def _enter(self, new_state: BaseModel) -> BaseModel:
        logger.debug(f"{type(self).__name__}: {self._state.state} -> {new_state.state}")
        self._state = new_state
        return new_state

    def reset(self) -> BaseModel:
        return self._enter(Idle())
