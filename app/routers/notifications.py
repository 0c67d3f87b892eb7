from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.notifications.types import ErrorKind, NotificationRequest
from app.schemas.notifications import NotificationErrorOut, SendNotificationIn, SendNotificationOut
from app.services.notifications.service import NotificationService

router = APIRouter(tags=["notifications"])

# 499: client closed request
STATUS_BY_KIND = {
    ErrorKind.INVALID_TOKEN: 400,
    ErrorKind.INVALID_PAYLOAD: 400,
    ErrorKind.SENDER_MISMATCH: 403,
    ErrorKind.CANCELLED: 499,
    ErrorKind.EXHAUSTED_RETRIES: 503,
}


def status_for(kind: ErrorKind | None) -> int:
    return STATUS_BY_KIND.get(kind, 502)


def get_notification_service(request: Request) -> NotificationService:
    return request.app.state.notification_service


@router.post(
    "/send-notification",
    response_model=SendNotificationOut,
    responses={
        400: {"model": NotificationErrorOut},
        413: {"model": NotificationErrorOut},
        422: {"model": NotificationErrorOut},
        502: {"model": NotificationErrorOut},
        503: {"model": NotificationErrorOut},
    },
)
async def send_notification(
    payload: SendNotificationIn,
    request: Request,
    service: NotificationService = Depends(get_notification_service),
):
    req = NotificationRequest(
        target_token=payload.token,
        title=payload.title,
        body=payload.body,
        data=payload.data,
    )
    result = await service.send(req, is_cancelled=request.is_disconnected)
    if result.success:
        return SendNotificationOut(response=result.provider_message_id)
    out = NotificationErrorOut(
        error_kind=result.error_kind.value,
        detail=result.detail,
        attempts=result.attempts,
    )
    return JSONResponse(status_code=status_for(result.error_kind), content=out.model_dump())
