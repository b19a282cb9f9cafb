"""Filesystem staging of project roots."""

from __future__ import annotations

from projget.staging.filesystem import GIT_METADATA_DIR, FilesystemStaging, StagedRoot

__all__ = [
    "GIT_METADATA_DIR",
    "FilesystemStaging",
    "StagedRoot",
]
