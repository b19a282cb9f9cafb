"""Project resolution.

Turns a user-supplied project identifier into a :class:`ProjectDescriptor`
and lists the project's environments. The provisioning core only depends on
the :class:`ProjectResolver` protocol; :class:`CatalogProjectResolver` is the
file-backed implementation used by the CLI.

Catalog format (``~/.config/projget/projects.yaml``):

    projects:
      demo:
        title: Demo shop
        git_url: git@git.example.com:demo.git
        api_url: https://api.example.com/projects/demo
        environments:
          master:
            title: Master
          feature-x:
            title: Feature X
            active: false
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from projget.exceptions import CatalogError
from projget.logging import get_logger
from projget.project.models import EnvironmentInfo, ProjectDescriptor

logger = get_logger(__name__)

__all__ = [
    "CatalogProjectResolver",
    "ProjectResolver",
]


@runtime_checkable
class ProjectResolver(Protocol):
    """Lookup of remote projects and their environments."""

    def get_project(
        self, project_id: str, host: str | None = None
    ) -> ProjectDescriptor | None:
        """Return the project, or None if it is unknown (on ``host``)."""
        ...

    def get_environments(
        self, descriptor: ProjectDescriptor
    ) -> dict[str, EnvironmentInfo]:
        """Return the project's environments keyed by id, in display order."""
        ...

    def list_projects(self) -> list[ProjectDescriptor]:
        """Return every project the resolver knows about."""
        ...


class _EnvironmentEntry(BaseModel):
    title: str | None = None
    active: bool = True


class _ProjectEntry(BaseModel):
    title: str | None = None
    git_url: str = Field(min_length=1)
    api_url: str | None = None
    host: str | None = None
    environments: dict[str, _EnvironmentEntry] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def allow_bare_environments(cls, data: object) -> object:
        """Accept ``environments: [master, staging]`` as shorthand."""
        if isinstance(data, dict) and isinstance(data.get("environments"), list):
            data = {**data, "environments": {name: {} for name in data["environments"]}}
        return data

    def api_host(self) -> str | None:
        if self.host:
            return self.host
        if self.api_url:
            return urlparse(self.api_url).hostname
        return None


class _Catalog(BaseModel):
    projects: dict[str, _ProjectEntry] = Field(default_factory=dict)


class CatalogProjectResolver:
    """Resolve projects from a YAML catalog file.

    The catalog is read on first use and cached for the lifetime of the
    resolver.

    Args:
        path: Path to the catalog file.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._catalog: _Catalog | None = None

    @property
    def path(self) -> Path:
        return self._path

    def get_project(
        self, project_id: str, host: str | None = None
    ) -> ProjectDescriptor | None:
        entry = self._load().projects.get(project_id)
        if entry is None:
            logger.debug("project_unknown", project_id=project_id)
            return None
        descriptor = self._describe(project_id, entry)
        if host is not None and descriptor.api_host not in (None, host):
            logger.debug(
                "project_host_mismatch",
                project_id=project_id,
                host=host,
                project_host=descriptor.api_host,
            )
            return None
        if host is not None and descriptor.api_host is None:
            descriptor = ProjectDescriptor(
                id=descriptor.id,
                title=descriptor.title,
                git_url=descriptor.git_url,
                api_host=host,
            )
        return descriptor

    def get_environments(
        self, descriptor: ProjectDescriptor
    ) -> dict[str, EnvironmentInfo]:
        entry = self._load().projects.get(descriptor.id)
        if entry is None:
            return {}
        return {
            env_id: EnvironmentInfo(
                id=env_id,
                title=env.title or env_id,
                active=env.active,
            )
            for env_id, env in entry.environments.items()
        }

    def list_projects(self) -> list[ProjectDescriptor]:
        return [
            self._describe(project_id, entry)
            for project_id, entry in self._load().projects.items()
        ]

    # =====================================================================
    # Internal helpers
    # =====================================================================

    @staticmethod
    def _describe(project_id: str, entry: _ProjectEntry) -> ProjectDescriptor:
        return ProjectDescriptor(
            id=project_id,
            title=entry.title or project_id,
            git_url=entry.git_url,
            api_host=entry.api_host(),
        )

    def _load(self) -> _Catalog:
        if self._catalog is not None:
            return self._catalog

        if not self._path.is_file():
            raise CatalogError(
                f"Project catalog not found: {self._path}", path=self._path
            )
        try:
            with open(self._path) as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise CatalogError(
                f"Failed to read project catalog {self._path}: {e}", path=self._path
            ) from e

        try:
            self._catalog = _Catalog.model_validate(loaded or {})
        except ValidationError as e:
            first_error = e.errors()[0]
            location = ".".join(str(loc) for loc in first_error["loc"])
            raise CatalogError(
                f"Invalid project catalog {self._path}: "
                f"{location}: {first_error['msg']}",
                path=self._path,
            ) from e

        logger.debug(
            "catalog_loaded", path=str(self._path), projects=len(self._catalog.projects)
        )
        return self._catalog
