from __future__ import annotations

import httpx
from fastapi import APIRouter, HTTPException, Request, status

from api.schemas import (
    ConsoleRequest,
    CreateStackRequest,
    DefaultsOut,
    ReportOut,
    SessionOut,
    StackRequest,
    UserStacksRequest,
)
from console.actions import StackConsole
from console.defaults import DEFAULT_POD_SPEC, DEFAULT_TARGET_PORT
from console.runner import ActionRunner, Report, render_report
from console.session import SessionState
from console.transport import get_http_client, normalize_base_url
from core.config import settings

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict:
    return {"status": "ok"}


@router.get("/console/defaults", response_model=DefaultsOut)
async def console_defaults(request: Request) -> DefaultsOut:
    return DefaultsOut(
        api_base=_resolve_api_base(request, None),
        pod_spec=DEFAULT_POD_SPEC,
        target_port=DEFAULT_TARGET_PORT,
    )


@router.get("/console/session", response_model=SessionOut)
async def console_session(request: Request) -> SessionOut:
    return SessionOut(stack_id=_session(request).active_stack_id)


@router.get("/console/last", response_model=ReportOut)
async def console_last(request: Request) -> ReportOut:
    report = _runner(request).last
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="no_report")
    return _report_out(report)


@router.post("/console/health", response_model=ReportOut)
async def console_health(payload: ConsoleRequest, request: Request) -> ReportOut:
    console = await _console(request, payload.api_base)
    return _report_out(await console.health())


@router.post("/console/stacks/list", response_model=ReportOut)
async def console_list_stacks(payload: ConsoleRequest, request: Request) -> ReportOut:
    console = await _console(request, payload.api_base)
    return _report_out(await console.list_stacks())


@router.post("/console/stats", response_model=ReportOut)
async def console_stats(payload: ConsoleRequest, request: Request) -> ReportOut:
    console = await _console(request, payload.api_base)
    return _report_out(await console.stats())


@router.post("/console/stacks/create", response_model=ReportOut)
async def console_create_stack(payload: CreateStackRequest, request: Request) -> ReportOut:
    console = await _console(request, payload.api_base)
    report = await console.create_stack(
        payload.target_port,
        payload.pod_spec,
        user_id=payload.user_id,
        problem_id=payload.problem_id,
    )
    return _report_out(report)


@router.post("/console/stacks/get", response_model=ReportOut)
async def console_get_stack(payload: StackRequest, request: Request) -> ReportOut:
    console = await _console(request, payload.api_base)
    return _report_out(await console.get_stack(payload.stack_id))


@router.post("/console/stacks/status", response_model=ReportOut)
async def console_stack_status(payload: StackRequest, request: Request) -> ReportOut:
    console = await _console(request, payload.api_base)
    return _report_out(await console.get_stack_status(payload.stack_id))


@router.post("/console/stacks/delete", response_model=ReportOut)
async def console_delete_stack(payload: StackRequest, request: Request) -> ReportOut:
    console = await _console(request, payload.api_base)
    return _report_out(await console.delete_stack(payload.stack_id))


@router.post("/console/users/stacks", response_model=ReportOut)
async def console_user_stacks(payload: UserStacksRequest, request: Request) -> ReportOut:
    console = await _console(request, payload.api_base)
    return _report_out(await console.list_user_stacks(payload.user_id))


async def _console(request: Request, api_base: str | None) -> StackConsole:
    return StackConsole(
        client=await _http_client(request),
        base_url=_resolve_api_base(request, api_base),
        session=_session(request),
        runner=_runner(request),
    )


async def _http_client(request: Request) -> httpx.AsyncClient:
    client = getattr(request.app.state, "http_client", None)
    if client is not None:
        return client
    return await get_http_client()


def _session(request: Request) -> SessionState:
    return request.app.state.session


def _runner(request: Request) -> ActionRunner:
    return request.app.state.runner


def _resolve_api_base(request: Request, requested: str | None) -> str:
    fallback = settings.stack_api_base_url or str(request.base_url)
    return normalize_base_url(requested, fallback)


def _report_out(report: Report) -> ReportOut:
    data = report.to_dict()
    return ReportOut(
        title=data["title"],
        timestamp=data["timestamp"],
        payload=data["payload"],
        text=render_report(report),
    )
