from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, load_settings
from .errors import install_error_handlers
from .logging import install_app_logging, setup_logging
from .routers.transcribe import router as transcribe_router
from .state import State


def _load_env_file(env_path: Path) -> None:
    """Minimal .env loader: KEY=VALUE lines into os.environ if not set.
    - Ignores comments and blank lines
    - Strips surrounding quotes
    - Supports optional 'export ' prefix
    """
    if not env_path.is_file():
        return
    try:
        lines = env_path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        logging.getLogger("app").warning(f"could not read {env_path}: {e}")
        return
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.lower().startswith("export "):
            line = line[7:].lstrip()
        if "=" not in line:
            continue
        k, v = line.split("=", 1)
        os.environ.setdefault(k.strip(), v.strip().strip('"').strip("'"))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    if settings is None:
        # Optional .env files (repo root and worker dir)
        worker_dir = Path(__file__).resolve().parent.parent
        _load_env_file(worker_dir.parent / ".env")
        _load_env_file(worker_dir / ".env")
        settings = load_settings()
    setup_logging()

    app = FastAPI(title="Broker Notes Worker", version="0.1.0")

    # Attach config/state
    app.state.settings = settings
    app.state.state = State(settings=settings)

    # CORS
    allow = [o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_app_logging(app)
    install_error_handlers(app)

    app.include_router(transcribe_router, prefix="/api")

    @app.get("/health")
    def health():  # pragma: no cover - trivial
        return {"status": "ok"}
    return app


# Convenience for `uvicorn broker_notes.app:app`
app = create_app()
