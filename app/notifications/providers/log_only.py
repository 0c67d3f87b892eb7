import logging
import uuid
from app.notifications.types import ValidatedRequest


class LogNotificationProvider:
    async def send(self, req: ValidatedRequest) -> str:
        message_id = f"log-{uuid.uuid4().hex}"
        logging.getLogger("notifications").info(
            "notify %s... %s (%s)", req.target_token[:8], req.title, message_id
        )
        return message_id
