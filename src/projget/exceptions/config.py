from __future__ import annotations

from typing import Any

from projget.exceptions.base import ProjgetError


class ConfigError(ProjgetError):
    """Exception for configuration loading, parsing, and validation errors.

    Raised when configuration cannot be loaded, parsed, or validated. This
    includes YAML parsing failures, pydantic validation errors, and invalid
    environment variable values.

    Attributes:
        message: Human-readable error message describing the configuration issue.
        field: Optional field name that caused the error (e.g., "remote_name").
        value: Optional value that failed validation (for debugging).

    Examples:
        ```python
        raise ConfigError("Failed to parse projget.yaml: invalid YAML at line 3")

        raise ConfigError(
            "Invalid configuration value",
            field="build.timeout_seconds",
            value=-1,
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message)
