"""Dynamic route registration for mock endpoints."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.routing import Mount

from virtual_api.generation.synthesizer import ResponseSynthesizer
from virtual_api.models import EndpointSchema
from virtual_api.registry.schema_loader import is_valid_schema

logger = logging.getLogger(__name__)

ROUTABLE_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
STATIC_MOUNT_NAME = "static"

_EXPRESS_PARAM = re.compile(r":(\w+)")


def to_route_path(endpoint: str) -> str:
    """Translate Express-style ``/users/:id`` into ``/users/{id}``."""
    path = _EXPRESS_PARAM.sub(r"{\1}", endpoint)
    return path if path.startswith("/") else "/" + path


async def read_input(request: Request) -> Any:
    """Collect the caller's input for the synthesizer.

    GET requests use the query string, everything else the JSON body.
    Path parameters are merged into object-shaped input.
    """
    if request.method == "GET":
        data: Any = dict(request.query_params)
    else:
        body = await request.body()
        try:
            data = json.loads(body) if body else {}
        except ValueError:
            logger.debug("Ignoring non-JSON body on %s %s", request.method, request.url.path)
            data = {}

    if request.path_params and isinstance(data, dict):
        data = {**request.path_params, **data}
    return data


class EndpointRegistry:
    """Keeps registered schemas and the FastAPI routes that serve them.

    Routes look their schema up by key on each request, so registering the
    same method and endpoint again swaps the schema without adding a second
    route.
    """

    def __init__(self, app: FastAPI, synthesizer: ResponseSynthesizer) -> None:
        self._app = app
        self._synthesizer = synthesizer
        self._schemas: dict[str, EndpointSchema] = {}

    @property
    def schemas(self) -> list[EndpointSchema]:
        return list(self._schemas.values())

    def get(self, key: str) -> EndpointSchema | None:
        return self._schemas.get(key)

    def register(self, schema: EndpointSchema) -> bool:
        """Register a schema and its route.

        Returns:
            True if the schema is now being served
        """
        if not is_valid_schema({"endpoint": schema.endpoint, "method": schema.method}):
            logger.warning("Skipping invalid schema: %r", schema)
            return False

        method = schema.method.upper()
        if method not in ROUTABLE_METHODS:
            logger.warning("Skipping schema %s: unsupported method %s", schema.endpoint, method)
            return False

        key = schema.key
        is_new = key not in self._schemas
        self._schemas[key] = schema

        if is_new:
            self._app.add_api_route(
                to_route_path(schema.endpoint),
                self._make_handler(key),
                methods=[method],
                name=key,
            )
            self._keep_static_last()
            logger.info("Registered virtual API: [%s] %s", method, schema.endpoint)
        else:
            logger.info("Replaced schema for virtual API: [%s] %s", method, schema.endpoint)
        return True

    def _make_handler(self, key: str):
        async def handler(request: Request) -> JSONResponse:
            schema = self._schemas[key]
            try:
                input_data = await read_input(request)
                result = await self._synthesizer.generate(schema, input_data)
                return JSONResponse(content=result)
            except Exception:
                logger.exception("API endpoint error for %s", key)
                return JSONResponse(
                    status_code=500,
                    content={"error": "Failed to generate synthetic response"},
                )

        return handler

    def _keep_static_last(self) -> None:
        # A mount at "/" swallows every path, so it must stay behind the API routes
        routes = self._app.router.routes
        mounts = [r for r in routes if isinstance(r, Mount) and r.name == STATIC_MOUNT_NAME]
        for mount in mounts:
            routes.remove(mount)
            routes.append(mount)
