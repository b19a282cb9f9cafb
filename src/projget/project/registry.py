"""Registry of known project roots.

The provisioning state machine asks the registry which project roots exist
around a target directory instead of comparing paths against process state
itself. :class:`LocalProjectRegistry` combines roots registered during this
process with roots discovered on disk through their metadata files.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

from projget.logging import get_logger
from projget.project.metadata import find_project_root

logger = get_logger(__name__)

__all__ = ["LocalProjectRegistry", "ProjectRootRegistry"]


@runtime_checkable
class ProjectRootRegistry(Protocol):
    """Source of truth for already provisioned project roots."""

    def known_roots(self, near: Path) -> list[Path]:
        """Return the roots relevant to a directory about to be created."""
        ...

    def register(self, root: Path) -> None:
        """Record a newly provisioned root."""
        ...


class LocalProjectRegistry:
    """Project roots from this process plus metadata found on disk.

    Args:
        roots: Roots known up front (e.g., the current project).
    """

    def __init__(self, roots: Iterable[Path] = ()) -> None:
        self._roots: list[Path] = [root.resolve() for root in roots]

    def known_roots(self, near: Path) -> list[Path]:
        """Return registered roots and the project root enclosing ``near``.

        Args:
            near: Directory whose surroundings are checked, typically the
                parent of the target directory.
        """
        roots = list(self._roots)
        enclosing = find_project_root(near)
        if enclosing is not None and enclosing not in roots:
            roots.append(enclosing)
        return roots

    def register(self, root: Path) -> None:
        resolved = root.resolve()
        if resolved not in self._roots:
            self._roots.append(resolved)
            logger.debug("project_root_registered", root=str(resolved))
