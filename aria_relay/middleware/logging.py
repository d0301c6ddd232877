"""Request logging middleware.

Each request yields one colored console line on the
``aria_relay.middleware.structured`` logger, plus a compact JSON record at
DEBUG level for log shippers.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("aria_relay.middleware.structured")

_RESET = "\u001b[0m"

# Checked top-down; the first floor the status reaches picks the color.
_STATUS_COLORS: tuple[tuple[int, str], ...] = (
    (500, "\u001b[31m"),
    (400, "\u001b[33m"),
    (300, "\u001b[36m"),
    (200, "\u001b[32m"),
)
_UNKNOWN_COLOR = "\u001b[36m"

_USER_AGENT_LIMIT = 256


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class RequestLogEntry:
    """Mutable record for one request, completed once the response is known."""

    method: str
    url: str
    client_ip: Optional[str]
    user_agent: Optional[str]
    timestamp: str = field(default_factory=_utc_now)
    status_code: Optional[int] = None
    duration_ms: Optional[float] = None
    error: Optional[str] = None
    _started: float = field(default_factory=time.perf_counter, repr=False)

    @classmethod
    def from_request(cls, request: Request) -> "RequestLogEntry":
        user_agent = request.headers.get("user-agent")
        return cls(
            method=request.method,
            url=str(request.url),
            client_ip=request.client.host if request.client else None,
            user_agent=user_agent[:_USER_AGENT_LIMIT] if user_agent else None,
        )

    def finish(self, status_code: int, error: Optional[str] = None) -> None:
        self.status_code = status_code
        self.duration_ms = round((time.perf_counter() - self._started) * 1000, 2)
        self.error = error

    @property
    def level(self) -> int:
        if self.status_code is not None and self.status_code >= 500:
            return logging.ERROR
        return logging.INFO

    def console_line(self) -> str:
        status = self.status_code or 0
        color = next((code for floor, code in _STATUS_COLORS if status >= floor), _UNKNOWN_COLOR)
        parts = (
            self.timestamp,
            f"{self.method} {self.url}",
            f"client={self.client_ip or '-'}",
            f"status={self.status_code if self.status_code is not None else '-'}",
            f"{self.duration_ms if self.duration_ms is not None else '-'}ms",
        )
        return f"{color}{' | '.join(parts)}{_RESET}"

    def as_json(self) -> str:
        payload: dict[str, Any] = {
            key: value for key, value in asdict(self).items() if not key.startswith("_")
        }
        return json.dumps(payload, separators=(",", ":"))


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request once it completes, or fails with an exception."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        entry = RequestLogEntry.from_request(request)

        try:
            response = await call_next(request)
        except Exception as exc:
            entry.finish(500, error=repr(exc))
            logger.exception(entry.console_line())
            raise

        entry.finish(response.status_code)
        logger.log(entry.level, entry.console_line())
        logger.debug(entry.as_json())
        return response
