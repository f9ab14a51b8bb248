from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def is_success_status(status: int) -> bool:
    return 200 <= status < 300


@dataclass(frozen=True)
class Outcome:
    method: str
    url: str
    status: int
    body: Any

    @property
    def succeeded(self) -> bool:
        return is_success_status(self.status)

    def to_payload(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "url": self.url,
            "status": self.status,
            "ok": self.succeeded,
            "body": self.body,
        }
