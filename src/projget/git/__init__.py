"""Git operations package using GitPython.

Usage:
    ```python
    from projget.git import GitGateway, RemoteRepositoryState

    gateway = GitGateway()
    state = gateway.probe_head("git@git.example.com:demo.git")
    ```
"""

from __future__ import annotations

from projget.git.gateway import GitGateway
from projget.git.models import RemoteRepositoryState

__all__ = [
    "GitGateway",
    "RemoteRepositoryState",
]
