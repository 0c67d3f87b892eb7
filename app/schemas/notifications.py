from typing import Dict
from pydantic import BaseModel


class SendNotificationIn(BaseModel):
    token: str | None = None
    title: str | None = None
    body: str | None = None
    data: Dict[str, str] | None = None


class SendNotificationOut(BaseModel):
    success: bool = True
    response: str


class NotificationErrorOut(BaseModel):
    success: bool = False
    error_kind: str
    detail: str | None = None
    attempts: int | None = None
