"""Root conftest — shared fixtures: stub engine, live session, HTTP client.

Invariants:
    - Every test gets a fresh StubEngine (no state leaks between tests)
    - The `session` fixture shuts its session down if the test left it active
    - The `client` fixture installs the session on app.state (ASGITransport skips lifespan)
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Ensure tests never try to import a real engine binding by default
os.environ.setdefault("SOURCEGATE_ENGINE_MODULE", "tests.engine_stub")
os.environ.setdefault("SOURCEGATE_LOG_FORMAT", "text")

from sourcegate.config import Settings  # noqa: E402
from sourcegate.services.engine_handle import EngineHandle  # noqa: E402
from sourcegate.services.session_facade import Session  # noqa: E402

from tests.engine_stub import StubEngine  # noqa: E402


@pytest.fixture
def engine():
    return StubEngine()


@pytest.fixture
def settings():
    return Settings(engine_module="tests.engine_stub", log_format="text")


@pytest.fixture
def handle(engine):
    return EngineHandle(engine.Workspace())


@pytest.fixture
async def session(engine, settings):
    s = await Session.create(settings, loader=engine.loader())
    yield s
    if s.is_active:
        s.shutdown()


@pytest.fixture
async def client(engine, settings, session):
    """API client bound to the stub-engine session."""
    from sourcegate.main import create_app

    app = create_app(settings, loader=engine.loader())
    app.state.engine_session = session
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
