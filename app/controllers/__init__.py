"""FastAPI routers acting as controllers in the MVC architecture."""

from . import content, email, metadata

__all__ = ["content", "email", "metadata"]
