from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from console.errors import Failure, PreconditionError
from console.outcome import Outcome
from core.metrics import record_action

logger = logging.getLogger(__name__)

ERROR_SUFFIX = " (ERROR)"

Operation = Callable[[], Any]
ReportSink = Callable[["Report"], None]


@dataclass(frozen=True)
class Report:
    title: str
    timestamp: datetime
    payload: Any

    @property
    def is_error(self) -> bool:
        return self.title.endswith(ERROR_SUFFIX)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "timestamp": self.timestamp.isoformat(),
            "payload": self.payload,
        }


class ActionRunner:
    """Runs one console action and turns whatever happens into a single Report."""

    def __init__(self, sink: ReportSink | None = None) -> None:
        self._sink = sink
        self.last: Report | None = None

    async def run(self, title: str, operation: Operation) -> Report:
        try:
            result = operation()
            if inspect.isawaitable(result):
                result = await result
        except Failure as exc:
            report = self._emit(f"{title}{ERROR_SUFFIX}", exc.payload())
            record_action(title, exc.kind)
            return report
        except PreconditionError as exc:
            report = self._emit(f"{title}{ERROR_SUFFIX}", {"error": exc.message})
            record_action(title, "precondition")
            return report
        except Exception as exc:
            logger.exception("console_action_failed: %s", title)
            report = self._emit(f"{title}{ERROR_SUFFIX}", {"error": str(exc) or exc.__class__.__name__})
            record_action(title, "error")
            return report

        report = self._emit(title, _payload_of(result))
        record_action(title, "ok")
        return report

    def _emit(self, title: str, payload: Any) -> Report:
        report = Report(title=title, timestamp=datetime.now(timezone.utc), payload=payload)
        self.last = report
        if self._sink is not None:
            self._sink(report)
        return report


def render_report(report: Report) -> str:
    payload = report.payload
    if isinstance(payload, str):
        body = payload
    else:
        body = json.dumps(payload, indent=2, ensure_ascii=False)
    return f"[{report.timestamp.isoformat()}] {report.title}\n\n{body}"


def _payload_of(result: Any) -> Any:
    if isinstance(result, Outcome):
        return result.to_payload()
    return result
