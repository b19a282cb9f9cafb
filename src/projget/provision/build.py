"""Initial build of a freshly provisioned project.

The build itself is opaque to projget: a :class:`BuildTrigger` is handed the
project root and the checked-out environment and either returns or raises.
:class:`CommandBuildTrigger` runs a configured command in the working copy.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from projget.config import DEFAULT_REPOSITORY_DIR
from projget.exceptions import BuildError
from projget.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "BUILD_ENVIRONMENT_VAR",
    "BUILD_PROJECT_ROOT_VAR",
    "BuildTrigger",
    "CommandBuildTrigger",
]

#: Environment variable carrying the checked-out environment to the build.
BUILD_ENVIRONMENT_VAR = "PROJGET_ENVIRONMENT"

#: Environment variable carrying the absolute project root to the build.
BUILD_PROJECT_ROOT_VAR = "PROJGET_PROJECT_ROOT"


@runtime_checkable
class BuildTrigger(Protocol):
    """Starts the initial build of a provisioned project."""

    def build(self, project_root: Path, environment: str) -> None:
        """Build the project; raise on failure."""
        ...


class CommandBuildTrigger:
    """Run a build command inside the project's working copy.

    Args:
        command: Command and arguments. Must not be empty.
        repository_dir: Working copy directory inside the project root.
        timeout_seconds: Maximum build duration.
    """

    def __init__(
        self,
        command: Sequence[str],
        *,
        repository_dir: str = DEFAULT_REPOSITORY_DIR,
        timeout_seconds: int = 600,
    ) -> None:
        if not command:
            raise ValueError("Build command must not be empty")
        self._command = list(command)
        self._repository_dir = repository_dir
        self._timeout_seconds = timeout_seconds

    def build(self, project_root: Path, environment: str) -> None:
        """Run the build command.

        Args:
            project_root: Absolute project root.
            environment: Environment that was checked out.

        Raises:
            BuildError: If the command cannot start, times out or exits
                non-zero.
        """
        cwd = project_root / self._repository_dir
        env = {
            **os.environ,
            BUILD_ENVIRONMENT_VAR: environment,
            BUILD_PROJECT_ROOT_VAR: str(project_root),
        }
        logger.info(
            "build_started",
            command=self._command,
            cwd=str(cwd),
            environment=environment,
        )
        try:
            result = subprocess.run(
                self._command,
                cwd=cwd,
                env=env,
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
            )
        except FileNotFoundError as e:
            raise BuildError(f"Build command not found: {self._command[0]}") from e
        except PermissionError as e:
            raise BuildError(f"Permission denied: {self._command[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise BuildError(
                f"Build timed out after {self._timeout_seconds} seconds"
            ) from e

        output = (result.stdout + result.stderr).strip()
        if result.returncode != 0:
            raise BuildError(
                f"Build command exited with code {result.returncode}"
                + (f":\n{output}" if output else ""),
                returncode=result.returncode,
                output=output,
            )
        logger.info("build_succeeded", cwd=str(cwd))
