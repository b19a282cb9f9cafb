from __future__ import annotations

from projget.exceptions.base import ProjgetError


class BuildError(ProjgetError):
    """The initial build of a provisioned project failed.

    Never fatal: the get workflow downgrades it to a warning.

    Attributes:
        message: Human-readable error message.
        returncode: Exit code of the build command, if it ran.
        output: Combined output of the build command.
    """

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        output: str = "",
    ) -> None:
        self.returncode = returncode
        self.output = output
        super().__init__(message)
