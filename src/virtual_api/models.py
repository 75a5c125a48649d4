"""Data models for the Virtual API server."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class EndpointSchema:
    """Declarative description of one mock API route."""

    endpoint: str  # "/customer/profile"
    method: str  # "GET", "POST", ...
    context: str | None = None  # What the endpoint is for, fed to the prompt
    response_schema: Any = None  # Flat field map or {"properties": {...}}
    extra: dict[str, Any] = field(default_factory=dict)  # Unknown keys from disk

    @property
    def key(self) -> str:
        """Registry key, e.g. 'get /customer/profile'."""
        return f"{self.method.lower()} {self.endpoint}"

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        data: dict[str, Any] = dict(self.extra)
        data["endpoint"] = self.endpoint
        data["method"] = self.method
        if self.context is not None:
            data["context"] = self.context
        if self.response_schema is not None:
            data["responseSchema"] = self.response_schema
        return data

    @classmethod
    def from_dict(cls, data: dict) -> EndpointSchema:
        """Deserialize from a dict."""
        known = {"endpoint", "method", "context", "responseSchema"}
        return cls(
            endpoint=data["endpoint"],
            method=data["method"],
            context=data.get("context"),
            response_schema=data.get("responseSchema"),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass
class FieldDescriptor:
    """A single response field, normalized from either schema shape."""

    name: str
    type: str | None = None
    enum: list[Any] | None = None


@dataclass
class ExtractionResult:
    """A JSON-shaped candidate located in free-form LLM text."""

    strategy: str  # "object_span", "array_span", "whole_text", "first_json_line"
    candidate: str
