"""Typed models describing remote projects and their environments."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

__all__ = [
    "EnvironmentInfo",
    "LocalProjectMetadata",
    "ProjectDescriptor",
]


@dataclass(frozen=True, slots=True)
class ProjectDescriptor:
    """A resolved remote project.

    Attributes:
        id: Project identifier.
        title: Human-readable project title.
        git_url: URL of the project's remote repository.
        api_host: Hostname of the API serving the project, if known.
    """

    id: str
    title: str
    git_url: str
    api_host: str | None = None

    @property
    def label(self) -> str:
        """Label used when offering the project in a choice list."""
        return f"{self.id} ({self.title})"


@dataclass(frozen=True, slots=True)
class EnvironmentInfo:
    """A branch-like deployment target of a project.

    Attributes:
        id: Environment identifier; doubles as the branch name.
        title: Human-readable title.
        active: False for environments that exist but could still be
            activated.
    """

    id: str
    title: str
    active: bool = True


@dataclass(frozen=True, slots=True)
class LocalProjectMetadata:
    """Record tying a local project root to its remote project.

    Attributes:
        id: Remote project identifier.
        host: API host of the project, if known.
        created_at: ISO-8601 timestamp of the provisioning run.
    """

    id: str
    host: str | None = None
    created_at: str = ""

    @classmethod
    def for_project(cls, descriptor: ProjectDescriptor) -> LocalProjectMetadata:
        return cls(
            id=descriptor.id,
            host=descriptor.api_host,
            created_at=datetime.now(tz=UTC).isoformat(),
        )

    def to_dict(self) -> dict[str, object]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, object], root: Path) -> LocalProjectMetadata:
        project_id = data.get("id")
        if not isinstance(project_id, str) or not project_id:
            raise ValueError(f"Project metadata in {root} has no project id")
        host = data.get("host")
        return cls(
            id=project_id,
            host=host if isinstance(host, str) else None,
            created_at=str(data.get("created_at", "")),
        )
