"""projget exception hierarchy.

All exceptions can be imported from this package:
    from projget.exceptions import ProjgetError, GitError, ProvisionError
"""

from __future__ import annotations

from projget.exceptions.base import ProjgetError
from projget.exceptions.build import BuildError
from projget.exceptions.config import ConfigError
from projget.exceptions.git import GitError, GitNotFoundError, NotARepositoryError
from projget.exceptions.project import CatalogError, ProjectNotFoundError
from projget.exceptions.provision import (
    CloneError,
    DirectoryCreationError,
    EnvironmentNotFoundError,
    MetadataWriteError,
    NestedProvisioningError,
    ProvisionError,
    RemoteConnectionError,
    RepositorySetupError,
    TargetDirectoryExistsError,
)

__all__ = [
    "BuildError",
    "CatalogError",
    "CloneError",
    "ConfigError",
    "DirectoryCreationError",
    "EnvironmentNotFoundError",
    "GitError",
    "GitNotFoundError",
    "MetadataWriteError",
    "NestedProvisioningError",
    "NotARepositoryError",
    "ProjectNotFoundError",
    "ProjgetError",
    "ProvisionError",
    "RemoteConnectionError",
    "RepositorySetupError",
    "TargetDirectoryExistsError",
]
