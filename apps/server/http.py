"""
OpenAI-compatible HTTP surface over the Orchestrator.

Request handling runs on the threadpool, one worker thread per request.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, Header, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from apps.server.orchestrator import Orchestrator
from packages.api.responses import build_error
from packages.core.errors import RequestValidationError
from packages.core.types import CompletionRequest

# error_kind -> (HTTP status, OpenAI error type)
ERROR_STATUS = {
    "invalid_request": (400, "invalid_request_error"),
    "no_model": (400, "invalid_request_error"),
    "config": (500, "server_error"),
    "inference": (500, "server_error"),
    "internal": (500, "server_error"),
}


def extract_bearer(authorization: Optional[str]) -> str:
    """Value of an `Authorization: Bearer <value>` header, or ''."""
    if not isinstance(authorization, str):
        return ""
    parts = authorization.strip().split(maxsplit=1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return ""
    return parts[1].strip()


def _error_response(kind: str, message: str) -> JSONResponse:
    status, type_ = ERROR_STATUS.get(kind, ERROR_STATUS["internal"])
    return JSONResponse(content=build_error(message, type_), status_code=status)


async def _json_body(request: Request) -> Dict[str, Any]:
    try:
        data = await request.json()
    except ValueError as e:
        raise RequestValidationError(f"request body is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise RequestValidationError("request body must be a JSON object")
    return data


def create_app(orchestrator: Orchestrator) -> FastAPI:
    app = FastAPI(title="promptgate")

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(_: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response("invalid_request", str(exc))

    def _complete(body: Dict[str, Any], authorization: Optional[str], *, chat: bool) -> JSONResponse:
        req = CompletionRequest.from_dict(body)
        res = orchestrator.handle(req, chat=chat, bearer=extract_bearer(authorization))
        if not res.ok:
            return _error_response(res.error_kind or "internal", res.error or "request failed")
        return JSONResponse(content=res.response)

    async def completions(request: Request, authorization: Optional[str] = Header(default=None)) -> JSONResponse:
        body = await _json_body(request)
        return await run_in_threadpool(_complete, body, authorization, chat=False)

    async def chat_completions(request: Request, authorization: Optional[str] = Header(default=None)) -> JSONResponse:
        body = await _json_body(request)
        return await run_in_threadpool(_complete, body, authorization, chat=True)

    def models() -> JSONResponse:
        return JSONResponse(content=orchestrator.list_models())

    for prefix in ("/v1", ""):
        app.add_api_route(f"{prefix}/completions", completions, methods=["POST"])
        app.add_api_route(f"{prefix}/chat/completions", chat_completions, methods=["POST"])
        app.add_api_route(f"{prefix}/models", models, methods=["GET"])

    return app

