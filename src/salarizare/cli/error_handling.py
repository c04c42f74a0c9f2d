"""CLI error handling helpers."""

import logging
from contextlib import contextmanager
from typing import Iterator

import click

from salarizare.domain.errors import DomainError, PersistenceError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError | OSError) -> None:
    """Render a domain error and exit with failure."""
    if isinstance(error, PersistenceError):
        logger.error("Store write failed: %s", error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


@contextmanager
def reported_errors(ctx: click.Context) -> Iterator[None]:
    """Turn domain and file errors raised inside the block into ``Error: ...`` and exit 1."""
    try:
        yield
    except (ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
