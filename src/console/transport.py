from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any

import httpx

from console.errors import ApplicationFailure, PreconditionError, TransportFailure
from console.outcome import Outcome
from core.config import settings
from core.metrics import record_stack_api_request

logger = logging.getLogger(__name__)
_CLIENTS: dict[str, httpx.AsyncClient] = {}
_CLIENT_LOCK = asyncio.Lock()

ALLOWED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

_DEFAULT_CLIENT_KEY = "default"


async def invoke(
    client: httpx.AsyncClient,
    base_url: str,
    method: str,
    path: str,
    body: Any | None = None,
) -> Outcome:
    verb = _normalize_method(method)
    url = f"{base_url}{path}"
    headers: dict[str, str] = {}
    content: str | None = None
    if body is not None:
        headers["Content-Type"] = "application/json"
        content = json.dumps(body)

    request_kwargs: dict[str, Any] = {"content": content, "headers": headers}
    timeout = _request_timeout()
    if timeout is not None:
        request_kwargs["timeout"] = timeout

    started = time.perf_counter()
    try:
        response = await client.request(verb, url, **request_kwargs)
        raw = response.text
    except httpx.RequestError as exc:
        record_stack_api_request(verb, url, None, time.perf_counter() - started)
        logger.warning("stack_api_unreachable: %s %s %s", verb, url, exc)
        raise TransportFailure(_transport_message(exc)) from exc

    record_stack_api_request(verb, url, response.status_code, time.perf_counter() - started)
    logger.debug("stack_api_request method=%s url=%s status=%s", verb, url, response.status_code)

    outcome = Outcome(
        method=verb,
        url=url,
        status=response.status_code,
        body=decode_body(raw),
    )
    if not outcome.succeeded:
        raise ApplicationFailure(outcome)
    return outcome


def decode_body(raw: str) -> Any:
    if not raw:
        return {}
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        return raw


def normalize_base_url(value: str | None, fallback: str) -> str:
    candidate = (value or "").strip()
    if not candidate:
        candidate = fallback.strip()
    return candidate.rstrip("/")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant: {name}")


def _normalize_method(method: str) -> str:
    verb = (method or "").strip().upper()
    if verb not in ALLOWED_METHODS:
        raise PreconditionError(f"unsupported method: {method}")
    return verb


def _request_timeout() -> httpx.Timeout | None:
    timeout_ms = settings.http_timeout_ms
    if timeout_ms and timeout_ms > 0:
        return httpx.Timeout(timeout_ms / 1000)
    return None


def _transport_message(exc: httpx.RequestError) -> str:
    message = str(exc).strip()
    return message or exc.__class__.__name__


async def get_http_client() -> httpx.AsyncClient:
    client = _CLIENTS.get(_DEFAULT_CLIENT_KEY)
    if client:
        return client
    async with _CLIENT_LOCK:
        client = _CLIENTS.get(_DEFAULT_CLIENT_KEY)
        if client:
            return client
        client = _build_httpx_client()
        _CLIENTS[_DEFAULT_CLIENT_KEY] = client
        return client


def _build_httpx_client() -> httpx.AsyncClient:
    limits = None
    max_conn = settings.http_pool_max_connections
    max_keepalive = settings.http_pool_max_keepalive
    if max_conn > 0 or max_keepalive > 0:
        limits = httpx.Limits(
            max_connections=max_conn if max_conn > 0 else None,
            max_keepalive_connections=max_keepalive if max_keepalive > 0 else None,
        )
    if limits is None:
        return httpx.AsyncClient()
    return httpx.AsyncClient(limits=limits)


async def close_http_clients() -> None:
    async with _CLIENT_LOCK:
        clients = list(_CLIENTS.values())
        _CLIENTS.clear()
    for client in clients:
        await client.aclose()
