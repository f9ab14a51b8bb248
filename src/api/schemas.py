from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ConsoleRequest(BaseModel):
    api_base: str | None = None


class CreateStackRequest(ConsoleRequest):
    target_port: int | None = None
    pod_spec: str = ""
    user_id: int | None = None
    problem_id: int | None = None


class StackRequest(ConsoleRequest):
    stack_id: str | None = None


class UserStacksRequest(ConsoleRequest):
    user_id: int | None = None


class ReportOut(BaseModel):
    title: str
    timestamp: str
    payload: Any = None
    text: str


class SessionOut(BaseModel):
    stack_id: str | None = None


class DefaultsOut(BaseModel):
    api_base: str
    pod_spec: str
    target_port: int
