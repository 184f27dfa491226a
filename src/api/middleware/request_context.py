# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request context middleware.

Binds request_id, user_id and organization_id to the structlog context
for the duration of a request and logs each request's outcome.
"""

import logging
import re
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.utils.logging import bind_context, clear_context

logger = logging.getLogger(__name__)

_ORGANIZATION_PATH = re.compile(r"/organizations/([0-9a-fA-F-]{36})")

SKIP_LOGGING_PATHS = frozenset({"/health", "/health/live", "/health/ready"})


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag every log line of a request with its identifiers.

    Must run after AuthMiddleware so request.state.user is populated;
    add it to the app before AuthMiddleware.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        user = getattr(request.state, "user", None)
        match = _ORGANIZATION_PATH.search(request.url.path)

        clear_context()
        bind_context(
            request_id=request_id,
            user_id=user.id if user else None,
            organization_id=match.group(1) if match else None,
        )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("%s %s failed", request.method, request.url.path)
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000

        response.headers["X-Request-ID"] = request_id
        if request.url.path not in SKIP_LOGGING_PATHS:
            logger.info(
                "%s %s -> %d (%.1fms)",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
            )
        clear_context()
        return response
