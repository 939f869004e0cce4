"""HTTP middleware."""

from mulaboard.api.middleware.timeout import TimeoutMiddleware

__all__ = ["TimeoutMiddleware"]
