"""Value types for remote repository probing."""

from __future__ import annotations

from enum import Enum

__all__ = ["RemoteRepositoryState"]


class RemoteRepositoryState(str, Enum):
    """Classification of a remote repository from a single HEAD probe.

    Attributes:
        UNREACHABLE: The remote could not be contacted (network, auth, bad URL).
        EMPTY: The remote answered but has no HEAD, i.e. no commits yet.
        POPULATED: The remote has a HEAD reference.
    """

    UNREACHABLE = "unreachable"
    EMPTY = "empty"
    POPULATED = "populated"
