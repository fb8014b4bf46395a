"""
Rate Limiting
Shared slowapi limiter.

The limiter object is module-level because route decorators bind to it at
import. Whether a request is limited is decided by the app serving it:
`RateLimitSwitchMiddleware` carries that app's `rate_limit_enabled` setting
into the request, and `rate_limit_exempt` reads it back.
"""

from contextvars import ContextVar

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.types import ASGIApp, Receive, Scope, Send

# Signup and login attempts per client IP
AUTH_RATE_LIMIT = "10/15minutes"

limiter = Limiter(key_func=get_remote_address)

_rate_limit_active: ContextVar[bool] = ContextVar("rate_limit_active", default=True)


def rate_limit_exempt() -> bool:
    return not _rate_limit_active.get()


class RateLimitSwitchMiddleware:
    """Apply one app's rate limit setting to every request it serves."""

    def __init__(self, app: ASGIApp, enabled: bool):
        self.app = app
        self.enabled = enabled

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        token = _rate_limit_active.set(self.enabled)
        try:
            await self.app(scope, receive, send)
        finally:
            _rate_limit_active.reset(token)
