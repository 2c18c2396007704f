"""Pydantic schemas used as views in the MVC architecture."""

from .common import CamelModel, ErrorResponse, NotFoundResponse
from .content import (
    FormattingOptions,
    GenerationAcceptedResponse,
    GenerationOptions,
    GenerationRequest,
    Style,
    Tone,
)
from .email import SendBlogEmailRequest, SendBlogEmailResponse
from .metadata import SuggestMetadataRequest, SuggestMetadataResponse

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "NotFoundResponse",
    "FormattingOptions",
    "GenerationOptions",
    "GenerationRequest",
    "GenerationAcceptedResponse",
    "Style",
    "Tone",
    "SendBlogEmailRequest",
    "SendBlogEmailResponse",
    "SuggestMetadataRequest",
    "SuggestMetadataResponse",
]
