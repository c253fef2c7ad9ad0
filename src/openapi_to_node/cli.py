"""CLI entry point for openapi-to-node."""

import json
from pathlib import Path

import click

from openapi_to_node.builder import BuilderConfig, NodePropertiesBuilder
from openapi_to_node.collector import BaseOperationsCollector, OperationsCollector
from openapi_to_node.errors import OpenAPINodeError
from openapi_to_node.logger import setup_logging
from openapi_to_node.openapi.loader import load_document, load_overrides
from openapi_to_node.openapi.schema_example import SchemaExample


def _encode(value):
    # Post-receive hooks are functions; name them in JSON output.
    if callable(value):
        return f"{value.__module__}.{value.__qualname__}"
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _to_json(value) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=_encode)


def _load(doc_path: Path) -> dict:
    try:
        return load_document(doc_path)
    except OpenAPINodeError as e:
        raise click.ClickException(str(e)) from e


@click.group()
def main():
    """openapi-to-node: generate node properties from OpenAPI documents."""
    pass


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output JSON file (stdout if omitted).")
@click.option("--overrides", "overrides_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML/JSON list of {find, replace} rules.")
@click.option("--no-notice", is_flag=True, help="Do not add the METHOD /path notice above each operation.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug details.")
def build(doc_path: Path, output: Path | None, overrides_path: Path | None, no_notice: bool, verbose: bool):
    """Build node properties from an OpenAPI document."""
    logger = setup_logging(verbose)
    doc = _load(doc_path)
    collector = BaseOperationsCollector if no_notice else OperationsCollector
    builder = NodePropertiesBuilder(doc, BuilderConfig(collector=collector, logger=logger))

    try:
        overrides = load_overrides(overrides_path) if overrides_path else []
        properties = builder.build(overrides)
    except OpenAPINodeError as e:
        raise click.ClickException(str(e)) from e

    text = _to_json(properties)
    if output is None:
        click.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    click.echo(f"Wrote {len(properties)} properties to {output}", err=True)
    if builder.errors:
        click.echo(f"Skipped {len(builder.errors)} operations that failed to build.", err=True)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.argument("schema_name")
def example(doc_path: Path, schema_name: str):
    """Print the synthesized example of #/components/schemas/SCHEMA_NAME."""
    doc = _load(doc_path)
    try:
        value = SchemaExample(doc).extract_example({"$ref": f"#/components/schemas/{schema_name}"})
    except OpenAPINodeError as e:
        raise click.ClickException(str(e)) from e
    click.echo(_to_json(value))


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
def inspect(doc_path: Path):
    """List resources and their operations."""
    doc = _load(doc_path)
    try:
        properties = NodePropertiesBuilder(doc).build()
    except OpenAPINodeError as e:
        raise click.ClickException(str(e)) from e

    for prop in properties:
        if prop["name"] != "operation" or prop["type"] != "options":
            continue
        click.echo(prop["displayOptions"]["show"]["resource"][0])
        for option in prop["options"]:
            request = option["routing"]["request"]
            click.echo(f"  {option['name']}: {request['method']} {request['url'][1:]}")
