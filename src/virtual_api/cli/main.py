"""CLI commands for the Virtual API server."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

import click
import uvicorn

from virtual_api.api.server import create_app
from virtual_api.generation.ollama_client import OllamaClient
from virtual_api.generation.synthesizer import ResponseSynthesizer
from virtual_api.models import EndpointSchema
from virtual_api.registry.schema_loader import load_schema_file, load_schemas

_LOG_LEVELS = ["debug", "info", "warning", "error"]


@click.group()
def cli() -> None:
    """Virtual API - Mock REST endpoints with LLM-generated responses."""
    pass


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
@click.option("--port", "-p", default=3000, help="Port to listen on (default: 3000)")
@click.option("--schemas-dir", "-s", default=None, help="Directory of schema JSON files")
@click.option("--public-dir", default=None, help="Directory of static UI files")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    help="Logging level (default: info)",
)
def serve(
    host: str,
    port: int,
    schemas_dir: str | None,
    public_dir: str | None,
    log_level: str,
) -> None:
    """Start the mock API server.

    Example: virtual-api serve --port 3000 --schemas-dir ./schemas
    """
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(schemas_dir=schemas_dir, public_dir=public_dir)
    click.echo(f"Virtual API server running at http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=log_level.lower())


@cli.command("schemas")
@click.option(
    "--schemas-dir",
    "-s",
    default=None,
    help="Directory of schema JSON files (default: $VIRTUAL_API_SCHEMAS_DIR or ./schemas)",
)
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON")
def list_schemas(schemas_dir: str | None, json_output: bool) -> None:
    """List the endpoints defined in a schemas directory."""
    schemas_dir = schemas_dir or os.environ.get("VIRTUAL_API_SCHEMAS_DIR", "schemas")
    schemas = load_schemas(schemas_dir)

    if json_output:
        click.echo(json.dumps([s.to_dict() for s in schemas], indent=2))
        return

    if not schemas:
        click.echo(f"No schemas found in {schemas_dir}.")
        return

    click.echo(f"{len(schemas)} endpoint(s) in {schemas_dir}:")
    for schema in schemas:
        click.echo(f"  {schema.method.upper():<6} {schema.endpoint}")
        if schema.context:
            click.echo(f"         {schema.context}")


@cli.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--input", "-i", "input_json", default="{}", help="Caller input as a JSON string")
@click.option("--model", "-m", default=None, help="Ollama model (default: $OLLAMA_MODEL or llama3)")
@click.option("--ollama-host", default=None, help="Ollama base URL (default: $OLLAMA_HOST)")
def generate(
    schema_file: Path,
    input_json: str,
    model: str | None,
    ollama_host: str | None,
) -> None:
    """Generate one mock response for a schema file.

    Example: virtual-api generate schemas/customer__profile.json -i '{"id": 7}'
    """
    schema = load_schema_file(schema_file)
    if schema is None:
        click.echo(f"Error: {schema_file} is not a valid schema", err=True)
        sys.exit(1)

    try:
        input_data = json.loads(input_json)
    except json.JSONDecodeError as e:
        click.echo(f"Error: --input is not valid JSON: {e}", err=True)
        sys.exit(1)

    result = asyncio.run(_generate_once(schema, input_data, model, ollama_host))
    click.echo(json.dumps(result, indent=2))


async def _generate_once(
    schema: EndpointSchema,
    input_data: Any,
    model: str | None,
    ollama_host: str | None,
) -> Any:
    synthesizer = ResponseSynthesizer(OllamaClient(host=ollama_host, model=model))
    try:
        return await synthesizer.generate(schema, input_data)
    finally:
        await synthesizer.aclose()


if __name__ == "__main__":
    cli()
