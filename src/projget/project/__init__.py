"""Remote project descriptors, local project metadata and root registry."""

from __future__ import annotations

from projget.project.metadata import (
    PROJECT_META_FILE,
    find_project_root,
    read_project_metadata,
    write_project_metadata,
)
from projget.project.models import (
    EnvironmentInfo,
    LocalProjectMetadata,
    ProjectDescriptor,
)
from projget.project.registry import LocalProjectRegistry, ProjectRootRegistry
from projget.project.resolver import CatalogProjectResolver, ProjectResolver

__all__ = [
    "PROJECT_META_FILE",
    "CatalogProjectResolver",
    "EnvironmentInfo",
    "LocalProjectMetadata",
    "LocalProjectRegistry",
    "ProjectDescriptor",
    "ProjectResolver",
    "ProjectRootRegistry",
    "find_project_root",
    "read_project_metadata",
    "write_project_metadata",
]
