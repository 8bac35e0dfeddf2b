from __future__ import annotations

import json
import logging
import os
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        data: Dict[str, Any] = {
            "level": record.levelname,
            "ts": int(time.time() * 1000),
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None) or _request_id.get()
        if request_id:
            data["request_id"] = request_id
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def _resolve_level(default: int = logging.INFO) -> int:
    env_level = os.getenv("WORKER_LOG_LEVEL")
    if not env_level:
        return default
    env_level = env_level.strip()
    if env_level.isdigit():
        return int(env_level)
    lvl = logging.getLevelName(env_level.upper())
    if isinstance(lvl, str):
        return default
    return int(lvl)


def setup_logging(level: int | None = None) -> None:
    resolved_level = level if level is not None else _resolve_level()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(resolved_level)
    for name in ("app", "app.transcribe", "app.analysis", "app.notes", "app.capture", "app.access"):
        logging.getLogger(name).setLevel(resolved_level)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        request_id = uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        token = _request_id.set(request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            _request_id.reset(token)
        dur_ms = int((time.perf_counter() - start) * 1000)
        response.headers["X-Request-ID"] = request_id
        logging.getLogger("app.access").info(
            json.dumps({
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": dur_ms,
            })
        )
        return response


def install_app_logging(app: FastAPI) -> None:
    app.add_middleware(RequestContextMiddleware)
