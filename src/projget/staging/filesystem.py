"""Filesystem staging for project roots.

A project root is created at the start of a get run and must disappear again
if the run does not complete. :meth:`FilesystemStaging.transaction` scopes
that guarantee: the root is removed on every exit from the ``with`` block
that has not called :meth:`StagedRoot.commit`.

Example:
    ```python
    staging = FilesystemStaging()
    with staging.transaction(Path("demo")) as staged:
        write_metadata(staged.path)
        clone_into(staged.path / "repository")
        staged.commit()
    ```
"""

from __future__ import annotations

import contextlib
import shutil
import sys
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from projget.exceptions import DirectoryCreationError, TargetDirectoryExistsError
from projget.logging import get_logger

logger = get_logger(__name__)

__all__ = ["FilesystemStaging", "StagedRoot", "GIT_METADATA_DIR"]

#: Version-control metadata directory inside a working copy.
GIT_METADATA_DIR = ".git"


@dataclass(slots=True)
class StagedRoot:
    """A project root owned by an open staging transaction.

    Attributes:
        path: Absolute path of the created root.
        committed: True once the run reached a successful terminal state.
    """

    path: Path
    committed: bool = field(default=False)

    def commit(self) -> None:
        """Keep the root when the transaction closes."""
        self.committed = True


class FilesystemStaging:
    """Create, remove and inspect project roots."""

    def create_root(self, path: Path) -> Path:
        """Create the project root directory.

        Args:
            path: Directory to create. Its parent must already exist.

        Returns:
            The absolute, resolved path of the new directory.

        Raises:
            TargetDirectoryExistsError: If ``path`` already exists.
            DirectoryCreationError: If the directory cannot be created.
        """
        try:
            path.mkdir()
        except FileExistsError as e:
            raise TargetDirectoryExistsError(path) from e
        except OSError as e:
            raise DirectoryCreationError(path, e) from e

        root = path.resolve()
        logger.info("project_root_created", path=str(root))
        return root

    def remove_root(self, path: Path) -> None:
        """Recursively remove a project root. A missing path is not an error.

        Entries that cannot be removed are logged and skipped, so a rollback
        always runs to completion.
        """
        if not path.exists() and not path.is_symlink():
            logger.debug("project_root_remove_noop", path=str(path))
            return

        failed: list[str] = []

        def _on_error(func: Callable[..., Any], failed_path: str, exc: Any) -> None:
            error = exc[1] if isinstance(exc, tuple) else exc
            failed.append(failed_path)
            logger.warning(
                "project_root_remove_failed", path=failed_path, error=str(error)
            )

        if sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=_on_error)
        else:
            shutil.rmtree(path, onerror=_on_error)

        if failed:
            logger.warning(
                "project_root_remove_incomplete", path=str(path), failed=len(failed)
            )
        else:
            logger.info("project_root_removed", path=str(path))

    def is_nested(self, candidate: Path, existing_roots: Iterable[Path]) -> bool:
        """Check whether ``candidate`` would be created inside a known root.

        Args:
            candidate: Directory about to be created.
            existing_roots: Roots of already provisioned projects.

        Returns:
            True if the candidate's parent is, or lies inside, any root.
        """
        parent = candidate.expanduser().absolute().parent.resolve()
        for root in existing_roots:
            resolved_root = root.resolve()
            if parent == resolved_root or resolved_root in parent.parents:
                return True
        return False

    def contains_only_metadata(self, repository_path: Path) -> bool:
        """Check whether a working copy holds nothing but the ``.git`` directory."""
        entries = [entry.name for entry in repository_path.iterdir()]
        return all(name == GIT_METADATA_DIR for name in entries)

    @contextlib.contextmanager
    def transaction(self, path: Path) -> Iterator[StagedRoot]:
        """Create ``path`` and remove it again unless the caller commits.

        If creation itself fails the exception propagates without any
        cleanup, since nothing was created (or the path belonged to someone
        else).

        Args:
            path: Directory to create.

        Yields:
            The :class:`StagedRoot` for the created directory.
        """
        staged = StagedRoot(path=self.create_root(path))
        try:
            yield staged
        finally:
            if not staged.committed:
                logger.info("staging_rolled_back", path=str(staged.path))
                self.remove_root(staged.path)
