"""HTTP client helpers for driving the content API from outside the server."""

from .poller import AudioTimeoutError, ContentPoller, PollTimeoutError

__all__ = ["AudioTimeoutError", "ContentPoller", "PollTimeoutError"]
