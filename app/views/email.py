"""Schemas for emailing a generated article."""

from typing import Optional
from uuid import UUID

from pydantic import EmailStr

from app.views.common import CamelModel


class SendBlogEmailRequest(CamelModel):
    request_id: UUID
    email: EmailStr


class SendBlogEmailResponse(CamelModel):
    success: bool
    message: str
    message_id: Optional[str] = None
