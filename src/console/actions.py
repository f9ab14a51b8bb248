from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from console.errors import USER_ID_REQUIRED, PreconditionError
from console.outcome import Outcome
from console.runner import ActionRunner, Report
from console.session import SessionState
from console.transport import invoke
from core.config import settings

logger = logging.getLogger(__name__)


class StackConsole:
    """Operator actions against one stack API base URL.

    Every public method produces exactly one Report through the runner.
    Stack-scoped actions take an optional explicit identifier and fall back
    to the session's active stack.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        session: SessionState,
        runner: ActionRunner,
    ) -> None:
        self.client = client
        self.base_url = base_url
        self.session = session
        self.runner = runner

    async def health(self) -> Report:
        return await self.runner.run("GET /healthz", lambda: self._request("GET", "/healthz"))

    async def list_stacks(self) -> Report:
        return await self.runner.run("GET /stacks", lambda: self._request("GET", "/stacks"))

    async def stats(self) -> Report:
        return await self.runner.run("GET /stats", lambda: self._request("GET", "/stats"))

    async def create_stack(
        self,
        target_port: int | None,
        pod_spec: str,
        *,
        user_id: int | None = None,
        problem_id: int | None = None,
    ) -> Report:
        async def operation() -> Outcome:
            payload: dict[str, Any] = {"target_port": target_port, "pod_spec": pod_spec}
            if user_id is not None:
                payload["user_id"] = user_id
            if problem_id is not None:
                payload["problem_id"] = problem_id
            outcome = await self._request("POST", "/stacks", payload)
            self.session.sync_from_outcome(outcome)
            return outcome

        return await self.runner.run("POST /stacks", operation)

    async def get_stack(self, stack_id: str | None = None) -> Report:
        return await self.runner.run(
            "GET /stacks/{stack_id}",
            lambda: self._request("GET", self._stack_path(stack_id)),
        )

    async def get_stack_status(self, stack_id: str | None = None) -> Report:
        return await self.runner.run(
            "GET /stacks/{stack_id}/status",
            lambda: self._request("GET", f"{self._stack_path(stack_id)}/status"),
        )

    async def delete_stack(self, stack_id: str | None = None) -> Report:
        async def operation() -> Outcome:
            resolved = self.session.require_stack_id(stack_id)
            outcome = await self._request("DELETE", _stack_path(resolved))
            if settings.session_clear_on_delete and resolved == self.session.active_stack_id:
                self.session.clear()
                logger.info("active_stack_cleared stack_id=%s", resolved)
            return outcome

        return await self.runner.run("DELETE /stacks/{stack_id}", operation)

    async def list_user_stacks(self, user_id: int | None) -> Report:
        async def operation() -> Outcome:
            if user_id is None:
                raise PreconditionError(USER_ID_REQUIRED)
            return await self._request("GET", f"/users/{user_id}/stacks")

        return await self.runner.run("GET /users/{user_id}/stacks", operation)

    def _stack_path(self, stack_id: str | None) -> str:
        return _stack_path(self.session.require_stack_id(stack_id))

    async def _request(self, method: str, path: str, body: Any | None = None) -> Outcome:
        return await invoke(self.client, self.base_url, method, path, body)


def _stack_path(stack_id: str) -> str:
    return f"/stacks/{quote(stack_id, safe='')}"
