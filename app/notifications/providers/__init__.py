from app.notifications.providers.base import ProviderClient
from app.notifications.providers.log_only import LogNotificationProvider
from app.notifications.providers.fcm import FirebaseProviderClient


def build_provider(settings) -> ProviderClient:
    if settings.PUSH_PROVIDER == "fcm":
        return FirebaseProviderClient.from_settings(settings)
    if settings.PUSH_PROVIDER == "log":
        return LogNotificationProvider()
    raise ValueError(f"Unknown push provider: {settings.PUSH_PROVIDER}")


__all__ = [
    "ProviderClient",
    "LogNotificationProvider",
    "FirebaseProviderClient",
    "build_provider",
]
