"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .pipeline_state import PipelineState  # noqa: F401

__all__ = [
    "Base",
    "PipelineState",
]
