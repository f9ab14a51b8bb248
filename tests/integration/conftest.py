from __future__ import annotations

import httpx
import pytest
import pytest_asyncio

from console.runner import ActionRunner
from console.session import SessionState
from tests.integration.mock_stack_api import create_mock_stack_api


@pytest.fixture
def mock_api():
    return create_mock_stack_api()


@pytest_asyncio.fixture
async def mock_client(mock_api):
    transport = httpx.ASGITransport(app=mock_api)
    async with httpx.AsyncClient(transport=transport) as client:
        yield client


@pytest.fixture
def session() -> SessionState:
    return SessionState()


@pytest.fixture
def runner() -> ActionRunner:
    return ActionRunner()
