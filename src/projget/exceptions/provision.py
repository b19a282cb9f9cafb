"""Provisioning exception hierarchy.

These exceptions are raised inside the provisioning state machine while a
staging transaction is open. The machine converts each of them into a
terminal outcome after the transaction has rolled back, so callers of
``ProvisioningStateMachine.provision`` normally never see them.
"""

from __future__ import annotations

from pathlib import Path

from projget.exceptions.base import ProjgetError

__all__ = [
    "ProvisionError",
    "TargetDirectoryExistsError",
    "NestedProvisioningError",
    "DirectoryCreationError",
    "MetadataWriteError",
    "EnvironmentNotFoundError",
    "RemoteConnectionError",
    "RepositorySetupError",
    "CloneError",
]


class ProvisionError(ProjgetError):
    """Base exception for provisioning failures.

    Attributes:
        message: Human-readable error message.
        directory: Target directory of the failed run.
    """

    def __init__(self, message: str, *, directory: Path | None = None) -> None:
        self.directory = directory
        super().__init__(message)


class TargetDirectoryExistsError(ProvisionError):
    """The target directory already exists; nothing was touched."""

    def __init__(self, directory: Path) -> None:
        super().__init__(
            f"The project directory '{directory}' already exists.",
            directory=directory,
        )


class NestedProvisioningError(ProvisionError):
    """The target lies inside an already provisioned project root.

    Attributes:
        enclosing_root: The project root containing the target.
    """

    def __init__(self, directory: Path, enclosing_root: Path) -> None:
        self.enclosing_root = enclosing_root
        super().__init__(
            f"A project cannot be cloned inside another project ({enclosing_root}).",
            directory=directory,
        )


class DirectoryCreationError(ProvisionError):
    """The target directory could not be created.

    Attributes:
        cause: The underlying OS error.
    """

    def __init__(self, directory: Path, cause: OSError) -> None:
        self.cause = cause
        super().__init__(
            f"Failed to create project directory {directory}: {cause}",
            directory=directory,
        )


class MetadataWriteError(ProvisionError):
    """Local project metadata could not be written."""

    def __init__(self, directory: Path, cause: OSError) -> None:
        self.cause = cause
        super().__init__(
            f"Failed to write project metadata in {directory}: {cause}",
            directory=directory,
        )


class EnvironmentNotFoundError(ProvisionError):
    """An explicitly requested environment is unknown to the project.

    Attributes:
        environment: The requested environment id.
        available: Known environment ids.
    """

    def __init__(
        self,
        environment: str,
        available: tuple[str, ...] = (),
        *,
        directory: Path | None = None,
    ) -> None:
        self.environment = environment
        self.available = available
        super().__init__(f"Environment not found: {environment}", directory=directory)


class RemoteConnectionError(ProvisionError):
    """The remote repository could not be reached."""

    def __init__(self, url: str, *, directory: Path | None = None) -> None:
        self.url = url
        super().__init__(
            f"Failed to connect to the Git server at {url}", directory=directory
        )


class CloneError(ProvisionError):
    """Cloning the populated remote repository failed."""

    def __init__(
        self, url: str, branch: str, *, directory: Path | None = None
    ) -> None:
        self.url = url
        self.branch = branch
        super().__init__(
            f"Failed to clone Git repository {url} (branch {branch})",
            directory=directory,
        )


class RepositorySetupError(ProvisionError):
    """The local repository could not be initialized or linked to the remote.

    Attributes:
        cause: The underlying git or OS error.
    """

    def __init__(self, directory: Path, cause: Exception) -> None:
        self.cause = cause
        super().__init__(
            f"Failed to set up repository in {directory}: {cause}",
            directory=directory,
        )
