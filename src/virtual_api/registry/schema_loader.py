"""Load endpoint schemas from a directory of JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from virtual_api.models import EndpointSchema

logger = logging.getLogger(__name__)

_RESERVED_KEYS = ("endpoint", "method", "context")


def route_from_filename(filename: str) -> str:
    """Derive a route from a schema file name.

    ``customer__profile.json`` and ``customer_profile.json`` both map to
    ``/customer/profile``.
    """
    stem = Path(filename).stem
    return "/" + stem.replace("__", "/").replace("_", "/")


def is_valid_schema(data: Any) -> bool:
    """Check that a schema dict has a string endpoint and method."""
    return (
        isinstance(data, dict)
        and isinstance(data.get("endpoint"), str)
        and isinstance(data.get("method"), str)
    )


def normalize_schema(data: dict, filename: str) -> dict:
    """Fill in endpoint, method and responseSchema defaults for a loaded file."""
    data = dict(data)
    if not data.get("endpoint"):
        data["endpoint"] = route_from_filename(filename)
    if not data.get("method"):
        data["method"] = "GET"
    if data.get("responseSchema") is None:
        rest = {k: v for k, v in data.items() if k not in _RESERVED_KEYS and k != "responseSchema"}
        data = {k: v for k, v in data.items() if k in _RESERVED_KEYS}
        data["responseSchema"] = rest
    return data


def load_schema_file(path: Path) -> EndpointSchema | None:
    """Load and normalize a single schema file.

    Returns:
        The schema, or None if the file is unreadable or not a valid schema
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error("Failed to load schema file %s: %s", path.name, e)
        return None

    if not isinstance(raw, dict):
        logger.error("Failed to load schema file %s: top-level value is not an object", path.name)
        return None

    data = normalize_schema(raw, path.name)
    if not is_valid_schema(data):
        logger.warning("Skipping invalid schema in %s", path.name)
        return None
    return EndpointSchema.from_dict(data)


def load_schemas(directory: str | Path) -> list[EndpointSchema]:
    """Load every ``.json`` schema in a directory, in file-name order.

    Args:
        directory: Directory holding schema files

    Returns:
        List of loaded schemas (invalid files are skipped)
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Schemas directory %s does not exist", directory)
        return []

    schemas: list[EndpointSchema] = []
    for path in sorted(directory.iterdir()):
        if not path.is_file() or path.suffix.lower() != ".json":
            continue
        schema = load_schema_file(path)
        if schema is not None:
            schemas.append(schema)

    logger.debug("Loaded %d schema(s) from %s", len(schemas), directory)
    return schemas
