"""Request tracing for the store API.

Every request carries an ``X-Request-ID``: the caller's value when it is a
sane token, a fresh UUID4 otherwise. The id, method and path are bound to
structlog's context so service-level events (``order.created``,
``coupon.applied``...) can be tied back to the HTTP call that caused them.
"""

import re
import time
import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger(__name__)

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_request_id(header: str | None) -> str:
    """Echo a well-formed caller id, otherwise mint a new one."""
    if header and _REQUEST_ID_RE.match(header):
        return header
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = resolve_request_id(request.META.get("HTTP_X_REQUEST_ID"))
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid,
            method=request.method,
            path=request.path,
        )

        logger.info("http.request_started", query=request.META.get("QUERY_STRING", ""))
        start = time.monotonic()

        response = self.get_response(request)

        log = logger.error if response.status_code >= 500 else logger.info
        log(
            "http.request_finished",
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )

        response["X-Request-ID"] = cid
        return response
