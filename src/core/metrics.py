from __future__ import annotations

from urllib.parse import urlparse

from prometheus_client import Counter, Histogram

from core.config import settings

ACTIONS_TOTAL = Counter(
    "stack_console_actions_total",
    "Console actions by action title and result.",
    ["action", "result"],
)
STACK_API_REQUESTS_TOTAL = Counter(
    "stack_console_api_requests_total",
    "Requests sent to the stack API by method, status, and host.",
    ["method", "status", "host"],
)
STACK_API_DURATION = Histogram(
    "stack_console_api_request_duration_seconds",
    "Stack API request duration in seconds.",
    ["method", "host"],
)


def record_action(action: str | None, result: str | None) -> None:
    if not settings.metrics_enabled:
        return
    ACTIONS_TOTAL.labels(
        action=_label(action, "unknown"),
        result=_label(result, "unknown"),
    ).inc()


def record_stack_api_request(
    method: str | None,
    url: str | None,
    status: int | None,
    seconds: float,
) -> None:
    if not settings.metrics_enabled:
        return
    method_label = _label(method, "unknown")
    host = _host_from_url(url)
    status_label = _label(str(status) if status is not None else None, "unreachable")
    STACK_API_REQUESTS_TOTAL.labels(method=method_label, status=status_label, host=host).inc()
    STACK_API_DURATION.labels(method=method_label, host=host).observe(seconds)


def _label(value: str | None, fallback: str) -> str:
    if value is None:
        return fallback
    value = str(value).strip()
    return value or fallback


def _host_from_url(url: str | None) -> str:
    if not url:
        return "unknown"
    try:
        host = urlparse(url).hostname
    except ValueError:
        host = None
    return host or "unknown"
