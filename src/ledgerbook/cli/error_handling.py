"""CLI error handling helpers."""

from typing import Any

import click

from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.results import OperationResult


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_result(ctx: click.Context, result: OperationResult[Any]) -> Any:
    """Return the data of a successful result, or render its error and exit."""
    if not result.success:
        click.echo(f"Error: {result.error}", err=True)
        ctx.exit(1)
    return result.data
