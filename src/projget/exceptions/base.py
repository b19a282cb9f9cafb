from __future__ import annotations


class ProjgetError(Exception):
    """Base exception class for all projget-specific errors.

    All custom exceptions in projget inherit from this class, so the CLI
    boundary can catch every projget error while letting system exceptions
    propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            resolver.get_project("demo")
        except ProjgetError as e:
            click.echo(format_error(e.message), err=True)
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the ProjgetError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
