"""FastAPI server for the Virtual API mock server."""

from __future__ import annotations

import json
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from virtual_api.api.endpoints import ROUTABLE_METHODS, STATIC_MOUNT_NAME, EndpointRegistry
from virtual_api.generation.synthesizer import ResponseSynthesizer
from virtual_api.models import EndpointSchema
from virtual_api.registry.schema_loader import load_schemas
from virtual_api.registry.schema_store import SchemaStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    service: str


class SchemaAddedResponse(BaseModel):
    """Response model for a successfully added schema."""

    message: str
    endpoint: str


def _is_valid_submission(payload: Any) -> bool:
    return (
        isinstance(payload, dict)
        and bool(payload.get("endpoint"))
        and bool(payload.get("method"))
        and payload.get("responseSchema") is not None
        and isinstance(payload["endpoint"], str)
        and isinstance(payload["method"], str)
        and payload["method"].upper() in ROUTABLE_METHODS
    )


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(
    schemas_dir: str | Path | None = None,
    public_dir: str | Path | None = None,
    synthesizer: ResponseSynthesizer | None = None,
    store: SchemaStore | None = None,
) -> FastAPI:
    """Build the mock server app.

    Args:
        schemas_dir: Directory of schema files. Defaults to
            ``VIRTUAL_API_SCHEMAS_DIR`` or ``./schemas``.
        public_dir: Static UI directory. Defaults to
            ``VIRTUAL_API_PUBLIC_DIR`` or ``./public``.
        synthesizer: Response synthesizer. Defaults to one backed by Ollama.
        store: Where submitted schemas are saved. Defaults to ``schemas_dir``.

    Returns:
        Configured FastAPI application with one route per loaded schema
    """
    schemas_dir = Path(schemas_dir or os.environ.get("VIRTUAL_API_SCHEMAS_DIR", "schemas"))
    public_dir = Path(public_dir or os.environ.get("VIRTUAL_API_PUBLIC_DIR", "public"))
    synthesizer = synthesizer or ResponseSynthesizer()
    store = store or SchemaStore(schemas_dir)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await synthesizer.aclose()

    app = FastAPI(
        title="Virtual API",
        description="Mock REST endpoints from JSON schemas, with LLM-generated responses",
        version="0.1.0",
        lifespan=lifespan,
    )
    registry = EndpointRegistry(app, synthesizer)
    app.state.registry = registry
    app.state.store = store

    @app.get("/health", response_model=HealthResponse)
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", service="virtual-api")

    @app.get("/schemas")
    def list_schemas() -> list[dict[str, Any]]:
        """List every registered endpoint schema."""
        return [schema.to_dict() for schema in registry.schemas]

    @app.post("/schemas", response_model=SchemaAddedResponse)
    async def add_schema(request: Request) -> Any:
        """Persist a new schema and start serving its endpoint."""
        try:
            payload = json.loads(await request.body() or b"null")
        except ValueError:
            payload = None

        if not _is_valid_submission(payload):
            return JSONResponse(status_code=400, content={"error": "Invalid schema format"})

        schema = EndpointSchema.from_dict(payload)
        try:
            store.save(schema)
            if not registry.register(schema):
                raise ValueError(f"Schema for {schema.endpoint} could not be registered")
        except (OSError, ValueError):
            logger.exception("Failed to save/register schema %s", schema.endpoint)
            return JSONResponse(
                status_code=500, content={"error": "Failed to save/register schema"}
            )

        return SchemaAddedResponse(message="Schema added successfully", endpoint=schema.endpoint)

    for schema in load_schemas(schemas_dir):
        registry.register(schema)

    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=public_dir, html=True), name=STATIC_MOUNT_NAME)
    else:
        logger.debug("No static UI directory at %s", public_dir)

    logger.info("Loaded %d API endpoint(s) from %s", len(registry.schemas), schemas_dir)
    for schema in registry.schemas:
        logger.info("  %s %s", schema.method.upper(), schema.endpoint)

    return app


app = create_app()
