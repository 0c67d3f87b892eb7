import json
from typing import Optional

from app.notifications.config import DEFAULT_MAX_PAYLOAD_BYTES
from app.notifications.errors import InvalidDataError, MissingFieldError, PayloadTooLargeError
from app.notifications.types import NotificationRequest, ValidatedRequest

RESERVED_DATA_KEYS = {"from", "notification", "message_type"}
RESERVED_DATA_PREFIXES = ("google.", "gcm.")


def _required(value: Optional[str], name: str) -> str:
    cleaned = value.strip() if isinstance(value, str) else ""
    if not cleaned:
        raise MissingFieldError(name)
    return cleaned


def _check_data(data) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, value in (data or {}).items():
        if not isinstance(key, str):
            raise InvalidDataError(str(key), "keys must be strings")
        if not isinstance(value, str):
            raise InvalidDataError(key, "values must be strings")
        if key in RESERVED_DATA_KEYS or key.startswith(RESERVED_DATA_PREFIXES):
            raise InvalidDataError(key, "reserved by the push provider")
        out[key] = value
    return out


def payload_size(title: str, body: str, data: dict[str, str]) -> int:
    blob = json.dumps({"title": title, "body": body, "data": data}, separators=(",", ":"), ensure_ascii=False)
    return len(blob.encode("utf-8"))


def validate(req: NotificationRequest, max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES) -> ValidatedRequest:
    """Check a notification request before it is handed to the dispatcher.

    Only the token is trimmed; title and body are forwarded as given. Raises
    ``MissingFieldError`` for the first of target_token, title, body that is
    empty after trimming, ``InvalidDataError`` for non-string or reserved data
    entries and ``PayloadTooLargeError`` when title, body and data together exceed
    ``max_payload_bytes`` once serialized.
    """
    token = _required(req.target_token, "target_token")
    _required(req.title, "title")
    _required(req.body, "body")
    title, body = req.title, req.body
    data = _check_data(req.data)

    size = payload_size(title, body, data)
    if size > max_payload_bytes:
        raise PayloadTooLargeError(size, max_payload_bytes)
    return ValidatedRequest(target_token=token, title=title, body=body, data=data)
