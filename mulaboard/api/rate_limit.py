"""
Client addressing and API throttling.

``get_client_ip`` resolves the reviewer's address behind the reverse
proxy; the eligibility gate hashes it. The slowapi ``limiter`` is a
coarse per-client request throttle, enabled via RATE_LIMIT_ENABLED=true,
independent of the submission windows.
"""

from slowapi import Limiter
from starlette.requests import Request

from mulaboard.config.settings import get_settings

DEFAULT_CLIENT_IP = "127.0.0.1"


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("X-Real-IP")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host

    return DEFAULT_CLIENT_IP


def _get_rate_limit_key(request: Request) -> str:
    """API key for the trusted front end, client IP for everyone else."""
    api_key = request.headers.get("X-API-KEY")
    if api_key:
        return api_key
    return get_client_ip(request)


def create_limiter() -> Limiter:
    """Create a configured Limiter instance."""
    settings = get_settings()
    return Limiter(
        key_func=_get_rate_limit_key,
        default_limits=[settings.rate_limit_default],
        storage_uri=str(settings.redis_url),
    )


limiter = create_limiter()
