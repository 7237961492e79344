"""Artificial latency middleware.

Delays every HTTP request by a fixed amount before it reaches the routers,
simulating a slow network. Documentation paths are served without delay.
"""

import asyncio
import logging

from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


class LatencyMiddleware:
    def __init__(self, app: ASGIApp, delay: float = 0.3, exempt_prefixes: tuple[str, ...] = ()):
        self.app = app
        self.delay = max(delay, 0)
        self.exempt_prefixes = exempt_prefixes

    def is_exempt(self, path: str) -> bool:
        return any(path == prefix or path.startswith(prefix + "/") for prefix in self.exempt_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and self.delay and not self.is_exempt(scope["path"]):
            await asyncio.sleep(self.delay)
        await self.app(scope, receive, send)
