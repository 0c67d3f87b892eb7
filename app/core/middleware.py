import logging
import time

logger = logging.getLogger("app.requests")


class RequestLogMiddleware:
    """Logs ``METHOD path status duration`` for each HTTP request.

    Plain ASGI so the downstream ``receive`` channel is left untouched and
    handlers can still observe ``http.disconnect``.
    """

    def __init__(self, app) -> None:
        self.app = app

    async def __call__(self, scope, receive, send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.time()
        status_code = 500

        async def send_with_status(message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_with_status)
        finally:
            duration_ms = (time.time() - start) * 1000
            logger.info("%s %s %s %.1fms", scope["method"], scope["path"], status_code, duration_ms)
