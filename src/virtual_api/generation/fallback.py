"""Deterministic placeholder responses derived from a response schema."""

from __future__ import annotations

from typing import Any

from virtual_api.models import FieldDescriptor

FALLBACK_ERROR_MESSAGE = "Failed to generate mock response from LLM."


def normalize_fields(response_schema: Any) -> list[FieldDescriptor]:
    """Flatten either schema shape into a list of field descriptors.

    ``{"properties": {...}}`` contributes its properties; any other mapping
    contributes its own entries. Descriptors may be a bare type name or an
    object with ``type`` and/or ``enum``.
    """
    if not isinstance(response_schema, dict):
        return []

    properties = response_schema.get("properties")
    entries = properties if isinstance(properties, dict) else response_schema

    fields: list[FieldDescriptor] = []
    for name, descriptor in entries.items():
        if isinstance(descriptor, str):
            fields.append(FieldDescriptor(name=name, type=descriptor))
        elif isinstance(descriptor, dict):
            enum = descriptor.get("enum")
            fields.append(
                FieldDescriptor(
                    name=name,
                    type=descriptor.get("type"),
                    enum=list(enum) if isinstance(enum, list) else None,
                )
            )
        else:
            fields.append(FieldDescriptor(name=name))
    return fields


def placeholder_value(descriptor: FieldDescriptor) -> Any:
    """Placeholder for a single field."""
    if descriptor.enum:
        return descriptor.enum[0]
    if descriptor.type == "number":
        return 123
    if descriptor.type == "boolean":
        return True
    # "string" and anything unrecognised
    return f"sample_{descriptor.name}"


def build_fallback(response_schema: Any) -> dict[str, Any]:
    """Build a placeholder response for a schema.

    Args:
        response_schema: The endpoint's declared response shape (may be None)

    Returns:
        One entry per schema field, or an error payload when there is no
        schema at all
    """
    if response_schema is None:
        return {"error": FALLBACK_ERROR_MESSAGE}
    return {f.name: placeholder_value(f) for f in normalize_fields(response_schema)}
