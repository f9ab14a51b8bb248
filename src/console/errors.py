from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Literal

from console.outcome import Outcome

STACK_ID_REQUIRED = "stack_id is required"
USER_ID_REQUIRED = "user_id is required"


class PreconditionError(Exception):
    """Raised before any exchange when a required input is missing or invalid."""

    code = "precondition_failed"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Failure(Exception, ABC):
    """Base of the two ways an exchange with the stack API can fail.

    ``kind`` tags the case so renderers never have to inspect the payload shape.
    """

    kind: Literal["transport", "application"]
    code: str

    @abstractmethod
    def payload(self) -> dict[str, Any]:
        ...


class TransportFailure(Failure):
    kind = "transport"
    code = "transport_failed"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def payload(self) -> dict[str, Any]:
        return {"error": self.message}


class ApplicationFailure(Failure):
    kind = "application"
    code = "application_failed"

    def __init__(self, outcome: Outcome) -> None:
        super().__init__(f"{outcome.method} {outcome.url} returned {outcome.status}")
        self.outcome = outcome

    @property
    def status(self) -> int:
        return self.outcome.status

    def payload(self) -> dict[str, Any]:
        return self.outcome.to_payload()
