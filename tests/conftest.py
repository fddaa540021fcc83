from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from contact_api.features.contact.routes import get_mailer
from contact_api.main import create_app
from contact_api.platform.config import Settings
from contact_api.platform.rate_limit import limiter
from tests.fakes import FakeMailer, make_settings


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def app(settings: Settings, mailer: FakeMailer):
    app = create_app(settings)
    app.dependency_overrides[get_mailer] = lambda: mailer
    return app


@pytest_asyncio.fixture
async def client(app) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http
