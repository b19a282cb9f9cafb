from __future__ import annotations

import contextlib
from collections.abc import Generator

import click

from projget.cli.context import ExitCode
from projget.cli.output import format_error
from projget.exceptions import ConfigError, GitError, ProjgetError
from projget.logging import get_logger

__all__ = ["cli_error_handler"]


@contextlib.contextmanager
def cli_error_handler() -> Generator[None, None, None]:
    """Context manager for common CLI error handling.

    Handles common error patterns across CLI commands:
    - KeyboardInterrupt / aborted prompt: Exit with code 130
    - GitError: Format error with operation details
    - ConfigError: Format error with the offending field and value
    - ProjgetError: Format error with message
    - Generic exceptions: Log and format error

    Example:
        >>> with cli_error_handler():
        >>>     # Command logic here
        >>>     result = provision_project(...)
    """
    logger = get_logger(__name__)

    try:
        yield
    except (KeyboardInterrupt, click.Abort):
        click.echo("\n\nInterrupted by user.", err=True)
        raise SystemExit(ExitCode.INTERRUPTED) from None
    except GitError as e:
        error_msg = format_error(
            e.message,
            details=[f"Operation: {e.operation}"] if e.operation else None,
        )
        click.echo(error_msg, err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except ConfigError as e:
        details = []
        if e.field:
            details.append(f"Field: {e.field}")
        if e.value is not None:
            details.append(f"Value: {e.value}")
        click.echo(format_error(e.message, details=details or None), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except ProjgetError as e:
        error_msg = format_error(e.message)
        click.echo(error_msg, err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except Exception as e:
        logger.exception("Unexpected error in command")
        click.echo(f"Error: {e!s}", err=True)
        raise SystemExit(ExitCode.FAILURE) from e
