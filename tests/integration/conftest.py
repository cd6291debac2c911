import re
from email.message import EmailMessage
from typing import List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tests.fixtures.json_loader import TestDataLoader
from vortex_auth.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from vortex_auth.api.app import create_app
from vortex_auth.app.services.email_dispatcher import EmailDispatcher
from vortex_auth.config import ApplicationConfig
from vortex_auth.depends import get_email_dispatcher

RESET_TOKEN = re.compile(r"token=([0-9a-f]{64})")


class RecordingEmailDispatcher(EmailDispatcher):
    """Keeps every message instead of sending it"""

    def __init__(self):
        super().__init__("noreply@vortex.test", "http://app.test", 24)
        self.outbox: List[EmailMessage] = []

    def deliver(self, message: EmailMessage) -> None:
        self.outbox.append(message)

    def last_reset_token(self) -> str:
        for message in reversed(self.outbox):
            match = RESET_TOKEN.search(message.get_content())
            if match:
                return match.group(1)
        raise AssertionError("no password reset email was sent")


def make_config(tmp_path, **overrides):
    attrs = {
        "ENVIRONMENT": "development",
        "DB_TYPE": "sqlite",
        "SQLITE_PATH": str(tmp_path / "vortex-test.db"),
        "JWT_SECRET": "integration-test-secret",
        "BCRYPT_ROUNDS": 10,
        "RATE_LIMIT_REQUESTS": 1,
        "RATE_LIMIT_BURST": 10_000,
        "CLEANUP_INTERVAL_MINUTES": 0,
        "SMTP_HOST": "",
        "CORS_ORIGINS": ["http://localhost:5173"],
    }
    attrs.update(overrides)
    return type("TestConfig", (ApplicationConfig,), attrs)


@pytest.fixture
def test_data():
    return TestDataLoader()


@pytest.fixture
def mailer():
    return RecordingEmailDispatcher()


@pytest.fixture
def build_app(tmp_path, mailer):
    """Factory: a fresh app with its schema, built from config overrides"""

    async def _build(**overrides):
        app = create_app(make_config(tmp_path, **overrides))
        await app.state.database.create_all()
        app.dependency_overrides[get_email_dispatcher] = lambda: mailer
        return app

    return _build


@pytest_asyncio.fixture
async def app(build_app):
    app = await build_app()
    yield app
    await app.state.database.dispose()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def database(app):
    return app.state.database


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def uow(db_session, database):
    return SqlAlchemyUnitOfWork(db_session, database)


@pytest_asyncio.fixture
async def registered_user(client, test_data):
    """Registers alice and returns the response data (token, session_id, user)"""
    response = await client.post("/api/auth/register", json=test_data.get_copy("register_alice"))
    assert response.status_code == 200
    return response.json()["data"]


@pytest_asyncio.fixture
async def auth_headers(registered_user):
    return {"Authorization": f"Bearer {registered_user['token']}"}
