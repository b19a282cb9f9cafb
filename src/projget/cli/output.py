"""Formatting helpers for projget CLI messages."""

from __future__ import annotations

__all__ = [
    "format_error",
    "format_success",
    "format_warning",
]


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Args:
        message: Primary error message.
        details: Optional list of detail lines to include.
        suggestion: Optional suggestion for resolving the error.

    Returns:
        Formatted error string with details and suggestion if provided.

    Example:
        >>> print(format_error(
        ...     "Failed to connect to the Git server",
        ...     suggestion="Please check your SSH credentials or contact support",
        ... ))
        Error: Failed to connect to the Git server
        Suggestion: Please check your SSH credentials or contact support
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def format_success(message: str) -> str:
    """Format a success message.

    Example:
        >>> format_success("Repository initialized")
        'Success: Repository initialized'
    """
    return f"Success: {message}"


def format_warning(message: str, details: list[str] | None = None) -> str:
    """Format a warning message, optionally followed by an indented block.

    Example:
        >>> format_warning("The build failed with an error")
        'Warning: The build failed with an error'
    """
    lines = [f"Warning: {message}"]
    if details:
        for detail in details:
            lines.append(f"  {detail}")
    return "\n".join(lines)
