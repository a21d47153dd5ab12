import time
import uuid

import structlog
from fastapi import HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def route_context(request: Request) -> dict:
    """The matched route name plus any `*_id` path parameters.

    Only populated once routing has run, i.e. after `call_next`.
    """
    route = request.scope.get("route")
    context = {"route": getattr(route, "name", None)}
    context.update(
        (key, value)
        for key, value in request.scope.get("path_params", {}).items()
        if key.endswith("_id")
    )
    return context


class LogRequestIdMiddleware(BaseHTTPMiddleware):
    """Tag every log line of a request with a request id.

    A caller-supplied `X-Request-ID` is reused so ids line up across services.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class LogProcessTimeMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()

        response: Response = await call_next(request)

        process_time_ms = f"{(time.perf_counter() - start) * 1000:.2f}"
        logger.info(
            "Request processed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time_ms=process_time_ms,
            **route_context(request),
        )

        response.headers["X-Process-Time"] = process_time_ms
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except HTTPException:
            raise
        except Exception:
            logger.error(
                "Unhandled exception",
                exc_info=True,
                method=request.method,
                path=request.url.path,
                **route_context(request),
            )
            return JSONResponse(
                status_code=500, content={"detail": "Internal Server Error"}
            )
