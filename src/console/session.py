from __future__ import annotations

import logging
from typing import Any

from console.errors import STACK_ID_REQUIRED, PreconditionError
from console.outcome import Outcome

logger = logging.getLogger(__name__)


class SessionState:
    """Holds the active stack identifier shared by the console actions.

    The identifier is either usable or absent, never blank. Only a successful
    create writes it; readers go through ``require_stack_id`` so every action
    fails the same way when it is missing.
    """

    def __init__(self) -> None:
        self._active_stack_id: str | None = None

    @property
    def active_stack_id(self) -> str | None:
        return self._active_stack_id

    def set_active_stack(self, stack_id: Any) -> None:
        value = _clean(stack_id)
        if value is None:
            return
        self._active_stack_id = value
        logger.info("active_stack_set stack_id=%s", value)

    def get_active_stack(self) -> str:
        if self._active_stack_id is None:
            raise PreconditionError(STACK_ID_REQUIRED)
        return self._active_stack_id

    def require_stack_id(self, explicit: str | None = None) -> str:
        value = _clean(explicit)
        if value is not None:
            return value
        return self.get_active_stack()

    def sync_from_outcome(self, outcome: Outcome) -> None:
        body = outcome.body
        if isinstance(body, dict):
            self.set_active_stack(body.get("stack_id"))

    def clear(self) -> None:
        self._active_stack_id = None


def _clean(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None
