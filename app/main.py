import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging import setup_logging
from app.core.middleware import RequestLogMiddleware
from app.notifications.config import NotificationsConfig
from app.notifications.errors import ValidationError
from app.notifications.providers import build_provider
from app.routers import health
from app.routers import notifications as notifications_router
from app.schemas.notifications import NotificationErrorOut
from app.services.notifications.service import NotificationService

setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    provider = build_provider(settings)
    app.state.notification_service = NotificationService(provider, NotificationsConfig.from_settings(settings))
    logging.getLogger("app").info("Push provider ready: %s", settings.PUSH_PROVIDER)
    yield
    close = getattr(provider, "close", None)
    if close is not None:
        close()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# CORS
origins = settings.cors_origin_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLogMiddleware)

app.include_router(health.router)
app.include_router(notifications_router.router)


@app.exception_handler(ValidationError)
async def notification_validation_error(request: Request, exc: ValidationError):
    out = NotificationErrorOut(error_kind=exc.kind.value, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content=out.model_dump(exclude_none=True))


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError):
    detail = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'][1:]) or 'body'}: {err['msg']}" for err in exc.errors()
    )
    out = NotificationErrorOut(error_kind=ValidationError.kind.value, detail=detail)
    return JSONResponse(status_code=422, content=out.model_dump(exclude_none=True))


@app.get("/")
async def root():
    return {"name": settings.APP_NAME, "env": settings.APP_ENV}


def run() -> None:
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
