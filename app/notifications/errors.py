from app.notifications.types import ErrorKind


class ValidationError(Exception):
    """Raised for malformed notification requests. Never retried."""

    kind = ErrorKind.VALIDATION
    status_code = 400

    @property
    def detail(self) -> str:
        return str(self)


class MissingFieldError(ValidationError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"missing field: {field}")


class PayloadTooLargeError(ValidationError):
    status_code = 413

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"payload is {size} bytes, limit is {limit}")


class InvalidDataError(ValidationError):
    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(f"invalid data key {key!r}: {reason}")


class ProviderError(Exception):
    transient = False

    def __init__(self, kind: ErrorKind, message: str = "") -> None:
        self.kind = kind
        super().__init__(message or kind.value)


class TransientProviderError(ProviderError):
    transient = True


class PermanentProviderError(ProviderError):
    transient = False
