import os

# must be set before app.main is imported: the lifespan builds the provider from settings
os.environ["PUSH_PROVIDER"] = "log"

import httpx
import pytest
from asgi_lifespan import LifespanManager

from app.main import app
from app.notifications.config import NotificationsConfig
from app.notifications.types import RetryPolicy
from app.routers.notifications import get_notification_service
from app.services.notifications.service import NotificationService
from tests.fixtures import RecordingSleep

API_BASE = "http://test"


@pytest.fixture
async def client():
    async with LifespanManager(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url=API_BASE) as ac:
            yield ac


@pytest.fixture
def use_provider():
    """Route /send-notification through the given provider with instant backoff."""

    def _use(provider, policy: RetryPolicy | None = None, timeout_s: float | None = None):
        config = NotificationsConfig(retry=policy or RetryPolicy(), timeout_s=timeout_s)
        service = NotificationService(provider, config, sleep=RecordingSleep())
        app.dependency_overrides[get_notification_service] = lambda: service
        return service

    yield _use
    app.dependency_overrides.pop(get_notification_service, None)
