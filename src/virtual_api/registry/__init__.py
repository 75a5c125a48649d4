"""Schema loading and persistence."""

from virtual_api.registry.schema_loader import load_schemas, route_from_filename
from virtual_api.registry.schema_store import SchemaStore

__all__ = ["SchemaStore", "load_schemas", "route_from_filename"]
