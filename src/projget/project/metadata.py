"""Persisted per-directory project metadata.

Each provisioned root carries a small JSON file recording which remote project
it belongs to. Other components use it to recognize "this directory is a
provisioned project", most importantly to refuse provisioning one project
inside another.
"""

from __future__ import annotations

import json
from pathlib import Path

from projget.logging import get_logger
from projget.project.models import LocalProjectMetadata, ProjectDescriptor

logger = get_logger(__name__)

__all__ = [
    "PROJECT_META_FILE",
    "find_project_root",
    "read_project_metadata",
    "write_project_metadata",
]

#: Metadata file written at the top of each project root.
PROJECT_META_FILE = ".projget-project.json"


def write_project_metadata(
    root: Path, descriptor: ProjectDescriptor
) -> LocalProjectMetadata:
    """Associate ``root`` with ``descriptor``.

    Args:
        root: Existing project root directory.
        descriptor: The remote project.

    Returns:
        The metadata that was written.

    Raises:
        OSError: If the file cannot be written.
    """
    metadata = LocalProjectMetadata.for_project(descriptor)
    meta_path = root / PROJECT_META_FILE
    meta_path.write_text(json.dumps(metadata.to_dict(), indent=2) + "\n")
    logger.debug(
        "project_metadata_written", path=str(meta_path), project_id=metadata.id
    )
    return metadata


def read_project_metadata(root: Path) -> LocalProjectMetadata | None:
    """Read the metadata of a project root.

    Returns:
        The metadata, or None if ``root`` holds no readable metadata file.
    """
    meta_path = root / PROJECT_META_FILE
    if not meta_path.is_file():
        return None
    try:
        data = json.loads(meta_path.read_text())
        if not isinstance(data, dict):
            raise ValueError("metadata is not a JSON object")
        return LocalProjectMetadata.from_dict(data, root)
    except (OSError, ValueError) as e:
        logger.warning("project_metadata_unreadable", path=str(meta_path), error=str(e))
        return None


def find_project_root(start: Path) -> Path | None:
    """Walk upward from ``start`` looking for a provisioned project root.

    Args:
        start: Directory to begin the search at; need not exist.

    Returns:
        The nearest enclosing root with readable metadata, or None.
    """
    current = start.expanduser().absolute().resolve()
    for candidate in (current, *current.parents):
        if read_project_metadata(candidate) is not None:
            return candidate
    return None
