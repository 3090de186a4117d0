"""formknobs command line tool.

- ``formknobs validate RECORD_FILE`` checks a record (JSON or YAML) against
  the product schema or a schema definition file
- ``formknobs schema`` shows a schema's fields and constraints
"""

from __future__ import annotations

import json
import logging
import sys

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import SCHEMA_ENV_VAR, load_config
from .exceptions import FormknobsError
from .product import PRODUCT_SCHEMA, SNAPSHOT_PRODUCT_SCHEMA
from .touched import visible_errors
from .validation import RecordSchema, load_schema, validate as validate_record

console = Console()

VARIANTS = {
    "full": PRODUCT_SCHEMA,
    "snapshot": SNAPSHOT_PRODUCT_SCHEMA,
}


def _resolve_schema(schema_file: str | None, variant: str) -> RecordSchema:
    if schema_file:
        try:
            return load_schema(schema_file)
        except FormknobsError as e:
            raise click.ClickException(f"Invalid schema file: {e}") from e
    return VARIANTS[variant]


schema_option = click.option(
    '--schema', '-s', 'schema_file',
    type=click.Path(exists=True, dir_okay=False),
    envvar=SCHEMA_ENV_VAR,
    help=f'Schema definition file (YAML or JSON); defaults to ${SCHEMA_ENV_VAR}',
)
variant_option = click.option(
    '--variant',
    type=click.Choice(sorted(VARIANTS)),
    default='full',
    show_default=True,
    help='Built-in product schema variant, used when no schema file is given',
)


@click.group()
@click.version_option(version=__version__)
@click.option('--log-level', default='WARNING', show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Logging level')
def cli(log_level: str):
    """formknobs - declarative record validation"""
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


@cli.command()
@click.argument('record_file', type=click.Path(exists=True, dir_okay=False))
@schema_option
@variant_option
@click.option('--touched', '-t', multiple=True,
              help='Only show errors for these fields (repeatable)')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
def validate(record_file: str, schema_file: str | None, variant: str,
             touched: tuple[str, ...], as_json: bool):
    """Validate a record file against a schema"""
    schema = _resolve_schema(schema_file, variant)
    try:
        record = load_config(record_file, substitute=False)
    except FormknobsError as e:
        raise click.ClickException(f"Cannot read record: {e}") from e

    result = validate_record(schema, record)
    errors = visible_errors(result.errors, touched) if touched else result.errors

    if as_json:
        payload = {
            "valid": result.valid,
            "value": result.value.to_dict() if result.value is not None else None,
            "errors": errors.flatten(),
        }
        click.echo(json.dumps(payload, indent=2))
    elif result.valid:
        console.print(f"[green]✓[/green] Record is valid for schema '{schema.name}'")
        table = Table(title="Validated record")
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_column("Type", style="dim")
        for name, value in result.record.items():
            table.add_row(name, repr(value), type(value).__name__)
        console.print(table)
    else:
        console.print(f"[red]✗[/red] Record is invalid for schema '{schema.name}'")
        table = Table(title="Errors")
        table.add_column("Field", style="cyan")
        table.add_column("Messages", style="red")
        for name, node in errors.items():
            if not node.is_empty:
                table.add_row(name, "\n".join(node.messages))
        console.print(table)
        hidden = len(result.errors.failing_fields) - len(errors.failing_fields)
        if hidden:
            console.print(f"[dim]{hidden} untouched field(s) with errors not shown[/dim]")

    if not result.valid:
        sys.exit(1)


@cli.command()
@schema_option
@variant_option
def schema(schema_file: str | None, variant: str):
    """Show the fields and constraints of a schema"""
    record_schema = _resolve_schema(schema_file, variant)

    table = Table(title=f"Schema: {record_schema.name}")
    table.add_column("Field", style="cyan")
    table.add_column("Type")
    table.add_column("Constraints")
    table.add_column("Messages", style="dim")
    for field_schema in record_schema.values():
        table.add_row(
            field_schema.name,
            field_schema.output_type.value,
            "\n".join(c.describe() for c in field_schema.constraints),
            "\n".join(c.message for c in field_schema.constraints),
        )
    console.print(table)


def main():
    """Main entry point"""
    cli()


if __name__ == '__main__':
    main()
