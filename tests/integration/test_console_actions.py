from __future__ import annotations

import pytest

from console.actions import StackConsole
from console.defaults import DEFAULT_POD_SPEC
from core.config import settings
from tests.integration.mock_stack_api import MOCK_BASE_URL


def _console(mock_client, session, runner) -> StackConsole:
    return StackConsole(mock_client, MOCK_BASE_URL, session, runner)


@pytest.mark.asyncio
async def test_create_stack_sets_active_stack(mock_client, mock_api, session, runner) -> None:
    console = _console(mock_client, session, runner)

    report = await console.create_stack(80, DEFAULT_POD_SPEC)

    assert report.title == "POST /stacks"
    assert report.payload["status"] == 201
    assert report.payload["ok"] is True
    assert report.payload["body"]["stack_id"] == "stack-1"
    assert report.payload["body"]["pod_spec"] == DEFAULT_POD_SPEC
    assert session.active_stack_id == "stack-1"
    assert mock_api.state.requests == [("POST", "/stacks")]


@pytest.mark.asyncio
async def test_create_stack_failure_leaves_session_unset(mock_client, session, runner) -> None:
    console = _console(mock_client, session, runner)

    report = await console.create_stack(80, "")

    assert report.title == "POST /stacks (ERROR)"
    assert report.payload["status"] == 400
    assert report.payload["body"] == {"error": "invalid input"}
    assert session.active_stack_id is None


@pytest.mark.asyncio
async def test_stack_actions_follow_active_stack(mock_client, session, runner) -> None:
    console = _console(mock_client, session, runner)
    await console.create_stack(8080, DEFAULT_POD_SPEC, user_id=7, problem_id=3)

    stack = await console.get_stack()
    status = await console.get_stack_status()

    assert stack.title == "GET /stacks/{stack_id}"
    assert stack.payload["url"] == f"{MOCK_BASE_URL}/stacks/stack-1"
    assert stack.payload["body"]["target_port"] == 8080
    assert status.title == "GET /stacks/{stack_id}/status"
    assert status.payload["body"] == {"stack_id": "stack-1", "status": "creating"}

    user_stacks = await console.list_user_stacks(7)
    assert user_stacks.payload["body"]["user_id"] == 7
    assert [s["stack_id"] for s in user_stacks.payload["body"]["stacks"]] == ["stack-1"]


@pytest.mark.asyncio
async def test_explicit_stack_id_overrides_active(mock_client, session, runner) -> None:
    console = _console(mock_client, session, runner)
    await console.create_stack(80, DEFAULT_POD_SPEC)
    await console.create_stack(81, DEFAULT_POD_SPEC)
    assert session.active_stack_id == "stack-2"

    report = await console.get_stack("  stack-1 ")

    assert report.payload["body"]["target_port"] == 80


@pytest.mark.asyncio
async def test_get_without_stack_id_makes_no_request(mock_client, mock_api, session, runner) -> None:
    console = _console(mock_client, session, runner)

    report = await console.get_stack("")

    assert report.title == "GET /stacks/{stack_id} (ERROR)"
    assert report.payload == {"error": "stack_id is required"}
    assert mock_api.state.requests == []


@pytest.mark.asyncio
async def test_delete_missing_stack_reports_application_failure(mock_client, session, runner) -> None:
    console = _console(mock_client, session, runner)

    report = await console.delete_stack("ghost")

    assert report.title == "DELETE /stacks/{stack_id} (ERROR)"
    assert report.payload == {
        "method": "DELETE",
        "url": f"{MOCK_BASE_URL}/stacks/ghost",
        "status": 404,
        "ok": False,
        "body": {"error": "stack not found"},
    }


@pytest.mark.asyncio
async def test_delete_keeps_active_stack_by_default(mock_client, session, runner, monkeypatch) -> None:
    monkeypatch.setattr(settings, "session_clear_on_delete", False)
    console = _console(mock_client, session, runner)
    await console.create_stack(80, DEFAULT_POD_SPEC)

    deleted = await console.delete_stack()
    again = await console.get_stack()

    assert deleted.payload["body"] == {"deleted": True, "stack_id": "stack-1"}
    assert session.active_stack_id == "stack-1"
    assert again.title == "GET /stacks/{stack_id} (ERROR)"
    assert again.payload["status"] == 404


@pytest.mark.asyncio
async def test_delete_clears_active_stack_when_configured(mock_client, session, runner, monkeypatch) -> None:
    monkeypatch.setattr(settings, "session_clear_on_delete", True)
    console = _console(mock_client, session, runner)
    await console.create_stack(80, DEFAULT_POD_SPEC)

    await console.delete_stack()
    report = await console.get_stack()

    assert session.active_stack_id is None
    assert report.payload == {"error": "stack_id is required"}


@pytest.mark.asyncio
async def test_read_actions_are_repeatable(mock_client, session, runner) -> None:
    console = _console(mock_client, session, runner)
    await console.create_stack(80, DEFAULT_POD_SPEC)

    first = await console.list_stacks()
    second = await console.list_stacks()

    assert first.payload == second.payload
    assert (await console.stats()).payload["body"] == {"total": 1}
    assert (await console.health()).payload["body"] == {"status": "ok"}


@pytest.mark.asyncio
async def test_runner_keeps_last_report(mock_client, session, runner) -> None:
    console = _console(mock_client, session, runner)

    await console.health()
    report = await console.get_stack_status()

    assert runner.last is report
    assert report.is_error
