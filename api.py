from __future__ import annotations

"""FastAPI entrypoint exposing the tools over HTTP.

Run locally:
    python -m uvicorn api:app --host 127.0.0.1 --port 8000 --reload

Request example:
    POST /tools/weather-forecast
    {"arguments": {"location": "Tokyo", "units": "metric"}}
"""

import json
import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from core.config import AppConfig
from core.runtime import build_registry, configure_logging
from tools.registry import ToolRegistry


class InvokeRequest(BaseModel):
    arguments: dict[str, Any] = Field(default_factory=dict)


class InvokeResponse(BaseModel):
    # Exactly one of "data" / "error", as returned by the tool.
    result: dict[str, Any]
    progress: list[dict[str, Any]]


class HealthResponse(BaseModel):
    status: str
    tools: list[str]


def create_app(registry: ToolRegistry | None = None) -> FastAPI:
    """Create FastAPI app.

    Optional registry injection keeps tests fast and independent of external APIs.
    """
    logger = logging.getLogger("tools.api")

    if registry is None:
        # Build runtime once during app startup.
        config = AppConfig.from_env()
        configure_logging(config)
        registry = build_registry(config)

    app = FastAPI(
        title="Weather & Currency Tools API",
        version="1.0.0",
    )

    # Tools are stateless, so concurrent requests need no lock.
    app.state.registry = registry

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", tools=app.state.registry.names)

    @app.get("/tools")
    async def list_tools() -> dict[str, Any]:
        return {
            "definitions": app.state.registry.definitions(),
            "schemas": app.state.registry.describe(),
        }

    @app.post("/tools/{name}", response_model=InvokeResponse)
    async def invoke(name: str, request: InvokeRequest) -> InvokeResponse:
        if app.state.registry.get(name) is None:
            raise HTTPException(status_code=404, detail=f"Unknown tool: {name}")

        logger.info("/tools/%s request received: argument_keys=%s", name, sorted(request.arguments))
        events: list[dict[str, Any]] = []

        # Tool calls block on HTTP; keep the event loop responsive.
        raw = await run_in_threadpool(app.state.registry.execute, name, request.arguments, events.append)

        result = json.loads(raw)
        logger.info("/tools/%s completed: ok=%s progress_events=%s", name, "data" in result, len(events))
        return InvokeResponse(result=result, progress=events)

    return app


# ASGI app instance used by uvicorn.
app = create_app()
