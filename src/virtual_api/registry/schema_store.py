"""File-backed persistence for schemas submitted over the API."""

from __future__ import annotations

import json
import logging
import os
import re
import time
from pathlib import Path

from virtual_api.models import EndpointSchema

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"\W+")


def safe_name(endpoint: str) -> str:
    """Turn an endpoint path into a file-name fragment."""
    return _NON_WORD.sub("_", endpoint).strip("_") or "schema"


class SchemaStore:
    """Writes schemas as pretty-printed JSON files in a directory."""

    def __init__(self, directory: str | Path | None = None) -> None:
        self._directory = Path(
            directory or os.environ.get("VIRTUAL_API_SCHEMAS_DIR", "schemas")
        )

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, schema: EndpointSchema, timestamp_ms: int | None = None) -> Path:
        """Build the target path ``<millis>_<safeName>.json``."""
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        return self._directory / f"{timestamp_ms}_{safe_name(schema.endpoint)}.json"

    def save(self, schema: EndpointSchema) -> Path:
        """Persist a schema.

        Returns:
            Path of the written file

        Raises:
            OSError: If the directory or file cannot be written
        """
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(schema)
        path.write_text(json.dumps(schema.to_dict(), indent=2), encoding="utf-8")
        logger.info("Saved schema for %s to %s", schema.key, path)
        return path
