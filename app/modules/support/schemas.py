from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class SupportComposeRequest(BaseModel):
    group_id: str
    recipient_id: str
    feeling_id: Optional[str] = None
    template_key: Optional[str] = None  # override the automatic choice


class SmsComposePayload(BaseModel):
    recipient_phone: str
    body: str
    sms_uri: str
    template_key: str


class SupportMessageResponse(BaseModel):
    id: str
    sender_id: str
    recipient_id: str
    group_id: str
    feeling_id: Optional[str] = None
    template_key: str
    body: str
    created_at: datetime


class TemplateResponse(BaseModel):
    key: str
    text: str
    keywords: list = Field(default_factory=list)
