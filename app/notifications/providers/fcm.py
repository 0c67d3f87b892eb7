import asyncio
import json
import logging
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, exceptions, messaging

from app.notifications.errors import PermanentProviderError, ProviderError, TransientProviderError
from app.notifications.types import ErrorKind, ValidatedRequest

logger = logging.getLogger(__name__)

APP_NAME = "push-dispatch"

# Most specific first: messaging errors subclass the generic firebase ones.
_ERROR_MAP: list[tuple[type, ErrorKind, bool]] = [
    (messaging.UnregisteredError, ErrorKind.INVALID_TOKEN, False),
    (messaging.SenderIdMismatchError, ErrorKind.SENDER_MISMATCH, False),
    (messaging.ThirdPartyAuthError, ErrorKind.UNAUTHENTICATED, False),
    (messaging.QuotaExceededError, ErrorKind.RATE_LIMITED, True),
    (exceptions.NotFoundError, ErrorKind.INVALID_TOKEN, False),
    (exceptions.InvalidArgumentError, ErrorKind.INVALID_PAYLOAD, False),
    (exceptions.PermissionDeniedError, ErrorKind.SENDER_MISMATCH, False),
    (exceptions.UnauthenticatedError, ErrorKind.UNAUTHENTICATED, False),
    (exceptions.ResourceExhaustedError, ErrorKind.RATE_LIMITED, True),
    (exceptions.UnavailableError, ErrorKind.UNAVAILABLE, True),
    (exceptions.DeadlineExceededError, ErrorKind.TIMEOUT, True),
    (exceptions.InternalError, ErrorKind.INTERNAL, True),
    (exceptions.UnknownError, ErrorKind.INTERNAL, True),
]


def classify_firebase_error(exc: exceptions.FirebaseError) -> ProviderError:
    for exc_type, kind, transient in _ERROR_MAP:
        if isinstance(exc, exc_type):
            cls = TransientProviderError if transient else PermanentProviderError
            return cls(kind, str(exc))
    return PermanentProviderError(ErrorKind.PROVIDER_REJECTED, str(exc))


def load_credential(service_account: Optional[str], path: str) -> credentials.Certificate:
    """Inline service account JSON wins over the key file on disk."""
    if service_account:
        return credentials.Certificate(json.loads(service_account))
    return credentials.Certificate(path)


class FirebaseProviderClient:
    def __init__(self, firebase_app: Any, *, dry_run: bool = False):
        self.firebase_app = firebase_app
        self.dry_run = dry_run

    @classmethod
    def from_settings(cls, settings) -> "FirebaseProviderClient":
        cred = load_credential(settings.FIREBASE_SERVICE_ACCOUNT, settings.FIREBASE_CREDENTIALS_PATH)
        firebase_app = firebase_admin.initialize_app(
            cred,
            options={"httpTimeout": settings.FCM_HTTP_TIMEOUT_S},
            name=APP_NAME,
        )
        logger.info("Firebase app initialized: %s", firebase_app.name)
        return cls(firebase_app, dry_run=settings.FCM_DRY_RUN)

    def build_message(self, req: ValidatedRequest) -> messaging.Message:
        return messaging.Message(
            notification=messaging.Notification(title=req.title, body=req.body),
            data=dict(req.data),
            token=req.target_token,
        )

    async def send(self, req: ValidatedRequest) -> str:
        message = self.build_message(req)
        try:
            return await asyncio.to_thread(messaging.send, message, dry_run=self.dry_run, app=self.firebase_app)
        except exceptions.FirebaseError as e:
            raise classify_firebase_error(e) from e

    def close(self) -> None:
        if self.firebase_app is not None:
            firebase_admin.delete_app(self.firebase_app)
            logger.info("Firebase app deleted")
            self.firebase_app = None
