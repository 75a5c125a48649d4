"""Tests for loading endpoint schemas from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from virtual_api.registry.schema_loader import (
    is_valid_schema,
    load_schema_file,
    load_schemas,
    normalize_schema,
    route_from_filename,
)


def _write(directory: Path, name: str, data: object) -> Path:
    path = directory / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestRouteFromFilename:
    def test_double_underscore(self) -> None:
        assert route_from_filename("customer__profile.json") == "/customer/profile"

    def test_single_underscore(self) -> None:
        assert route_from_filename("customer_profile.json") == "/customer/profile"

    def test_plain_name(self) -> None:
        assert route_from_filename("orders.json") == "/orders"


class TestNormalizeSchema:
    def test_defaults(self) -> None:
        data = normalize_schema({"responseSchema": {"id": "number"}}, "users__list.json")
        assert data["endpoint"] == "/users/list"
        assert data["method"] == "GET"
        assert data["responseSchema"] == {"id": "number"}

    def test_stray_keys_become_response_schema(self) -> None:
        data = normalize_schema(
            {"context": "Weather", "city": "string", "temp": "number"}, "weather.json"
        )
        assert data == {
            "context": "Weather",
            "endpoint": "/weather",
            "method": "GET",
            "responseSchema": {"city": "string", "temp": "number"},
        }

    def test_nothing_but_endpoint(self) -> None:
        data = normalize_schema({"endpoint": "/ping", "method": "POST"}, "ping.json")
        assert data["responseSchema"] == {}

    def test_explicit_values_kept(self) -> None:
        raw = {"endpoint": "/a", "method": "PUT", "responseSchema": {}}
        assert normalize_schema(raw, "other.json") == raw


class TestIsValidSchema:
    def test_valid(self) -> None:
        assert is_valid_schema({"endpoint": "/a", "method": "GET"})

    def test_non_string_fields(self) -> None:
        assert not is_valid_schema({"endpoint": 5, "method": "GET"})
        assert not is_valid_schema({"endpoint": "/a", "method": None})

    def test_not_a_dict(self) -> None:
        assert not is_valid_schema(["/a", "GET"])


class TestLoadSchemas:
    def test_loads_json_files_in_order(self, tmp_path: Path) -> None:
        _write(tmp_path, "b_items.json", {"endpoint": "/b", "responseSchema": {"x": "string"}})
        _write(tmp_path, "a_items.json", {"endpoint": "/a", "responseSchema": {"y": "number"}})

        schemas = load_schemas(tmp_path)

        assert [s.endpoint for s in schemas] == ["/a", "/b"]
        assert all(s.method == "GET" for s in schemas)

    def test_skips_non_json_files(self, tmp_path: Path) -> None:
        _write(tmp_path, "ok.json", {"id": "string"})
        (tmp_path / "README.md").write_text("# notes")
        (tmp_path / "nested.json").mkdir()

        schemas = load_schemas(tmp_path)
        assert [s.endpoint for s in schemas] == ["/ok"]

    def test_uppercase_extension(self, tmp_path: Path) -> None:
        _write(tmp_path, "upper.JSON", {"id": "string"})
        assert [s.endpoint for s in load_schemas(tmp_path)] == ["/upper"]

    def test_invalid_json_skipped(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        _write(tmp_path, "good.json", {"id": "string"})

        with caplog.at_level(logging.ERROR):
            schemas = load_schemas(tmp_path)

        assert [s.endpoint for s in schemas] == ["/good"]
        assert "broken.json" in caplog.text

    def test_top_level_array_skipped(self, tmp_path: Path) -> None:
        _write(tmp_path, "list.json", [1, 2, 3])
        assert load_schemas(tmp_path) == []

    def test_invalid_endpoint_type_skipped(self, tmp_path: Path) -> None:
        _write(tmp_path, "bad.json", {"endpoint": 42, "responseSchema": {}})
        assert load_schemas(tmp_path) == []

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert load_schemas(tmp_path / "nope") == []

    def test_context_and_extra_keys(self, tmp_path: Path) -> None:
        _write(
            tmp_path,
            "x.json",
            {
                "endpoint": "/x",
                "method": "post",
                "context": "Creates an x",
                "responseSchema": {"id": "number"},
                "tags": ["demo"],
            },
        )
        schema = load_schema_file(tmp_path / "x.json")
        assert schema is not None
        assert schema.method == "post"
        assert schema.key == "post /x"
        assert schema.context == "Creates an x"
        assert schema.extra == {"tags": ["demo"]}


class TestBundledSchemas:
    def test_repository_schemas_load(self) -> None:
        schemas_dir = Path(__file__).resolve().parent.parent / "schemas"
        schemas = load_schemas(schemas_dir)
        endpoints = {s.endpoint for s in schemas}
        assert {"/customer/profile", "/orders", "/weather/current"} <= endpoints
