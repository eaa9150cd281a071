# fechou/middleware/request_logging.py

import time
import uuid
import logging
from fastapi import Request

from fechou.core.logging import request_id_var

logger = logging.getLogger("access")

REQUEST_ID_HEADER = "X-Request-ID"


def _request_id(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
    return incoming[:64] if incoming else uuid.uuid4().hex[:12]


async def request_logging_middleware(request: Request, call_next):
    request_id = _request_id(request)
    request.state.request_id = request_id
    token = request_id_var.set(request_id)

    start_time = time.perf_counter()
    status_code = 500

    try:
        response = await call_next(request)
        status_code = response.status_code
    finally:
        process_time = (time.perf_counter() - start_time) * 1000

        # user_id is set by get_current_user on authenticated routes
        logger.log(
            logging.WARNING if status_code >= 500 else logging.INFO,
            "",
            extra={
                "request_id": request_id,
                "user_id": getattr(request.state, "user_id", None) or "-",
                "client_addr": request.client.host if request.client else "unknown",
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "process_time_ms": round(process_time, 2),
            },
        )
        request_id_var.reset(token)

    response.headers[REQUEST_ID_HEADER] = request_id
    return response
