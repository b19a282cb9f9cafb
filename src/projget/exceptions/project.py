from __future__ import annotations

from pathlib import Path

from projget.exceptions.base import ProjgetError


class ProjectNotFoundError(ProjgetError):
    """No project with the given identifier is known to the resolver.

    Attributes:
        project_id: The identifier that failed to resolve.
        host: The API host the lookup was restricted to, if any.
    """

    def __init__(self, project_id: str, host: str | None = None) -> None:
        self.project_id = project_id
        self.host = host
        super().__init__(f"Project not found: {project_id}")


class CatalogError(ProjgetError):
    """The project catalog file is missing, unreadable or invalid.

    Attributes:
        path: Path to the catalog file.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)
