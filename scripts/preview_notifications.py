import asyncio

from app.core.logging import setup_logging
from app.notifications.providers.log_only import LogNotificationProvider
from app.notifications.types import NotificationRequest
from app.services.notifications.service import NotificationService


if __name__ == "__main__":
    setup_logging()
    service = NotificationService(LogNotificationProvider())
    result = asyncio.run(service.send(NotificationRequest(target_token="demo-device", title="Hello", body="World")))
    print("notification preview sent:", result.provider_message_id)
