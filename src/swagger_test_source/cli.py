"""CLI entry point for swagger-test-source."""

import json
import logging
from pathlib import Path

import click

from swagger_test_source.config import SwaggerOptions
from swagger_test_source.errors import SwaggerSourceError
from swagger_test_source.parser.filter import RequestFilter
from swagger_test_source.source import SwaggerSource


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Swagger Test Source — turn OpenAPI documents into testable HTTP requests."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command("map")
@click.argument("sources", nargs=-1, required=True)
@click.option("--base-url", default=None, help="Base URL joined with the document's server URL.")
@click.option("--whitelist", multiple=True, help="Only keep this operationId (repeatable).")
@click.option("--blacklist", multiple=True, help="Drop this operationId (repeatable).")
@click.option("--use-examples", is_flag=True, help="Fill parameter and property values from declared examples.")
@click.option("--all-operations", is_flag=True, help="Map operations without a @loadtest/@integrationtest marker too.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write JSON here instead of stdout.")
def map_command(
    sources: tuple[str, ...],
    base_url: str | None,
    whitelist: tuple[str, ...],
    blacklist: tuple[str, ...],
    use_examples: bool,
    all_operations: bool,
    output: Path | None,
):
    """Map API documents (files or URLs) to test requests, printed as JSON."""
    options = SwaggerOptions(
        base_url=base_url,
        request_filter=RequestFilter(
            endpoint_name_whitelist=frozenset(whitelist),
            endpoint_name_blacklist=frozenset(blacklist),
        ),
        use_example_values=use_examples,
        require_test_markers=not all_operations,
    )

    try:
        requests = SwaggerSource(options).load(list(sources))
    except SwaggerSourceError as e:
        raise click.ClickException(str(e)) from e

    result = json.dumps([r.model_dump(mode="json") for r in requests], indent=2)
    if output is None:
        click.echo(result)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result, encoding="utf-8")
    click.echo(f"Wrote {len(requests)} requests to {output}", err=True)
