"""
=============================================================================
DISPATCH ACCESS LOG
=============================================================================

One structured log line per dispatched request: what came in, what went
out, how long it took.

=============================================================================
LOG FORMATS
=============================================================================

    text (default, for humans and CloudWatch-style consoles):

        a1b2c3d4 POST /orders 201 57 12.48ms

    json (for log aggregators):

        {"request_id": "a1b2c3d4", "method": "POST", "path": "/orders",
         "status_code": 201, "content_length": 57, "duration_ms": 12.48,
         "preflight": false, "timestamp": "18/Oct/2026:10:00:00 +0000"}

The request id is the gateway's own ``requestContext.requestId`` when
present, so log lines can be joined with the gateway's logs; otherwise a
short random id is generated.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional
import json
import logging
import time
import uuid

from ..http.request import ProxyRequest
from ..http.response import ProxyResponse


# Namespaced so it can be routed separately:
#   logging.getLogger("proxyhandler.access").setLevel(logging.WARNING)
logger = logging.getLogger("proxyhandler.access")


@dataclass
class DispatchLog:
    """Structured log entry for one dispatch."""

    request_id: str
    method: str
    path: str
    status_code: int
    content_length: int
    duration_ms: float
    preflight: bool
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "method": self.method,
            "path": self.path,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
            "preflight": self.preflight,
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        return (
            f"{self.request_id} {self.method} {self.path} {self.status_code} "
            f"{self.content_length} {self.duration_ms:.2f}ms"
        )


class AccessLogger:
    """
    Emits a DispatchLog for each completed dispatch.

    Usage:
        access_log = AccessLogger(log_format="json")

        started = time.perf_counter()
        response = ...
        access_log.record(request, response, started)
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        """
        Args:
            log_format: "text" or "json".
            log_level: Level the entries are logged at.
        """
        self.log_format = log_format
        self.log_level = log_level

    def record(
        self,
        request: ProxyRequest,
        response: ProxyResponse,
        started: float,
    ) -> DispatchLog:
        """
        Build and emit the log entry.

        Args:
            request: The dispatched request.
            response: The final response.
            started: ``time.perf_counter()`` taken when dispatch began.

        Returns:
            The emitted entry.
        """
        entry = DispatchLog(
            request_id=self._request_id(request),
            method=request.http_method if isinstance(request.http_method, str) else "-",
            path=request.path,
            status_code=int(response.status_code),
            content_length=len(response.body),
            duration_ms=(time.perf_counter() - started) * 1000,
            preflight=request.is_options,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())
        return entry

    @staticmethod
    def _request_id(request: ProxyRequest) -> str:
        gateway_id: Optional[str] = request.request_context.get("requestId")
        if gateway_id:
            return str(gateway_id)
        return str(uuid.uuid4())[:8]
