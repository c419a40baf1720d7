import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import rich_click as click
import yaml
from ariadne.exceptions import GraphQLFileSyntaxError
from graphql import GraphQLError
from pydantic import ValidationError
from rich.markup import escape
from rich.traceback import install

from granate import __version__, log
from granate.annotations import STANDARD_ANNOTATION_FACTORIES, AnnotationExtractor
from granate.config import load_config
from granate.errors import GranateError
from granate.execution import granate
from granate.schema_loader import load_schema_str

schema_option = click.option(
    "--schema",
    "-s",
    "schemas",
    type=str,
    required=True,
    multiple=True,
    help="GraphQL schema file, directory containing schema files, or URL. Can be specified multiple times.",
)


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file",
)


def load_variables(variables_path: Path | None) -> dict[str, Any] | None:
    """Load query variables from a JSON or YAML file."""
    if variables_path is None:
        return None

    content = variables_path.read_text(encoding="utf-8")
    variables = json.loads(content) if variables_path.suffix == ".json" else yaml.safe_load(content)
    if variables is None:
        return None
    if not isinstance(variables, dict):
        raise ValueError(f"Variables file '{variables_path}' must contain a mapping")
    return variables


@click.group(context_settings={"auto_envvar_prefix": "granate"})
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="INFO",
    help="Log level",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Log file",
)
@click.version_option(__version__)
def cli(log_level: str, log_file: Path | None) -> None:
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
        log.addHandler(file_handler)

    log.setLevel(log_level.upper())
    if log_level.upper() == "DEBUG":
        _ = install(show_locals=True)


@cli.command()
@schema_option
@click.option(
    "--query",
    "-q",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="File with the GraphQL query to execute",
)
@click.option(
    "--variables",
    "-v",
    "variables_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON or YAML file with the query variables",
)
@click.option("--operation-name", type=str, help="Name of the operation to execute")
@config_option
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    required=False,
    help="Output file",
)
def run(
    schemas: tuple[str, ...],
    query: Path,
    variables_path: Path | None,
    operation_name: str | None,
    config_path: Path | None,
    output: Path | None,
) -> None:
    """Execute a query against an annotated schema, mocking what is not resolved."""
    try:
        config = load_config(config_path)
        schema_str = load_schema_str(list(schemas))
        variables = load_variables(variables_path)
        result = asyncio.run(
            granate(
                schema_str,
                query.read_text(encoding="utf-8"),
                variables,
                operation_name=operation_name,
                config=config,
            )
        )
    except (OSError, RuntimeError) as e:
        log.error(f"File I/O error: {e}")
        sys.exit(1)
    except (GranateError, GraphQLError, GraphQLFileSyntaxError, ValidationError, ValueError) as e:
        log.error(f"Invalid input: {e}")
        sys.exit(1)

    formatted = result.formatted
    if output:
        output.write_text(json.dumps(formatted, indent=2, default=str), encoding="utf-8")
        log.success(f"Result written to {output}")
    else:
        log.print_dict(dict(formatted))

    if result.errors:
        for error in result.errors:
            log.error(error.message)
        sys.exit(1)


@cli.command()
@schema_option
def annotations(schemas: tuple[str, ...]) -> None:
    """List the annotations recognised in a schema."""
    try:
        schema_str = load_schema_str(list(schemas))
        extracted = AnnotationExtractor(STANDARD_ANNOTATION_FACTORIES).parse(schema_str)
    except (OSError, RuntimeError) as e:
        log.error(f"File I/O error: {e}")
        sys.exit(1)
    except (GranateError, GraphQLError, GraphQLFileSyntaxError, ValueError) as e:
        log.error(f"Invalid schema: {e}")
        sys.exit(1)

    log.rule(f"Annotations ({len(extracted)})")
    for annotation in extracted:
        log.list_item(escape(repr(annotation)))


@cli.command(name="config")
@config_option
def show_config(config_path: Path | None) -> None:
    """Show the effective configuration."""
    try:
        config = load_config(config_path)
    except (OSError, ValueError) as e:
        log.error(f"Invalid configuration: {e}")
        sys.exit(1)

    log.print_dict(config.model_dump(by_alias=True))


if __name__ == "__main__":
    cli()
