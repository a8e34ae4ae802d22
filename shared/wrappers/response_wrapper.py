import json
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.responses import JSONResponse
from fastapi import Request
from shared.core.schemas import JsonOutResult
from typing import Callable, Any

logger = logging.getLogger(__name__)

LIST_KEYS = {"items", "updates", "approvals", "dispatches", "children"}


def replace_nulls_with_empty(value: Any):
    """
    Recursively replaces None based on expected structure:
    - List fields -> []
    - Primitives -> ""
    """
    if isinstance(value, dict):
        cleaned = {}
        for k, v in value.items():
            if v is None and k.lower() in LIST_KEYS:
                cleaned[k] = []
            else:
                cleaned[k] = replace_nulls_with_empty(v)
        return cleaned

    elif isinstance(value, list):
        return [replace_nulls_with_empty(v) for v in value]

    elif value is None:
        return ""

    return value


def _passthrough_headers(response):
    return {k: v for k, v in response.headers.items()
            if k.lower() != "content-length"}


def _error_message(data: Any) -> str:
    if isinstance(data, dict):
        detail = data.get("detail")
        if isinstance(detail, dict):
            return str(detail.get("message") or "")
        if detail:
            return str(detail)
        return str(data.get("message") or "")
    if isinstance(data, str):
        return data
    return "An unexpected error occurred"


class JsonResponseMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        # Skip docs/openapi endpoints
        if request.url.path.startswith(("/openapi", "/docs", "/redoc")):
            return await call_next(request)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception("Unhandled error on %s %s",
                             request.method, request.url.path)

            wrapped_error = JsonOutResult(
                data="",
                status="Failed",
                status_code="500",
                message=f"Internal Server Error: {e}",
            ).model_dump(exclude_none=False)

            return JSONResponse(content=replace_nulls_with_empty(wrapped_error),
                                status_code=500)

        # CSV and PDF downloads go out untouched
        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            return response

        body_bytes = b""
        async for chunk in response.body_iterator:
            body_bytes += chunk

        try:
            data = json.loads(body_bytes.decode("utf-8")) if body_bytes else None
        except ValueError:
            data = None

        # Error responses (4xx/5xx)
        if not (200 <= response.status_code < 400):
            internal_status_code = str(response.status_code)
            if isinstance(data, dict):
                detail = data.get("detail")
                if isinstance(detail, dict) and detail.get("status_code"):
                    internal_status_code = str(detail["status_code"])
                elif data.get("status_code"):
                    internal_status_code = str(data["status_code"])

            wrapped_error = JsonOutResult(
                data="",
                status="Failed",
                status_code=internal_status_code,
                message=_error_message(data),
            ).model_dump(exclude_none=False)

            return JSONResponse(
                content=replace_nulls_with_empty(wrapped_error),
                status_code=response.status_code,
                headers=_passthrough_headers(response),
            )

        if data is not None:
            data = replace_nulls_with_empty(data)

        # Skip wrapping if already wrapped
        if isinstance(data, dict) and {"status", "status_code", "message"}.issubset(data.keys()):
            return JSONResponse(
                content=data,
                status_code=response.status_code,
                headers=_passthrough_headers(response),
            )

        wrapped = JsonOutResult(
            data=data if data not in [None, {}] else "",
            status="Success",
            status_code=str(response.status_code),
            message="Data retrieved successfully"
        ).model_dump(exclude_none=False)

        return JSONResponse(
            content=replace_nulls_with_empty(wrapped),
            status_code=response.status_code,
            headers=_passthrough_headers(response),
        )
