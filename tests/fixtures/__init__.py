"""Shared test fixtures for the projget test suite.

Available Fixtures
==================

Git remotes (from tests/fixtures/git.py)
----------------------------------------

Functions:
    create_remote: Build a bare remote with an optional single commit pushed
        to one or more branches.

Fixtures:
    make_remote: Factory for bare remotes under ``tmp_path/remotes``.
    empty_remote: Remote without any commit; ``ls-remote HEAD`` prints
        nothing.
    populated_remote: Remote with code on ``master`` and ``staging``.
    metadata_only_remote: Remote whose commit has an empty tree, so a clone
        contains nothing but ``.git``.
    unreachable_url: Path-style URL that does not exist.

Project catalogs (from tests/fixtures/catalog.py)
-------------------------------------------------

Fixtures:
    make_catalog: Factory writing ``projects.yaml`` into ``tmp_path``.
    sample_descriptor: A ProjectDescriptor for tests that never reach git.

Example:
    >>> def test_clone(populated_remote, make_catalog):
    ...     catalog = make_catalog(
    ...         {"demo": {"title": "Demo", "git_url": str(populated_remote)}}
    ...     )
"""

from __future__ import annotations

from tests.fixtures.catalog import make_catalog, sample_descriptor, write_catalog
from tests.fixtures.git import (
    create_remote,
    empty_remote,
    make_remote,
    metadata_only_remote,
    populated_remote,
    unreachable_url,
)

__all__ = [
    # Git remotes
    "create_remote",
    "make_remote",
    "empty_remote",
    "populated_remote",
    "metadata_only_remote",
    "unreachable_url",
    # Project catalogs
    "make_catalog",
    "sample_descriptor",
    "write_catalog",
]
