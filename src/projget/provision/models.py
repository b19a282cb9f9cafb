"""Result types of a get run.

The state machine never prints or raises for expected failures; it returns a
:class:`ProvisionOutcome`. The workflow wraps that together with the build
report into a :class:`GetResult`, which is what the presentation layer
renders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

__all__ = [
    "BuildReport",
    "BuildStatus",
    "GetResult",
    "OutcomeKind",
    "ProvisionOutcome",
]


class OutcomeKind(str, Enum):
    """Terminal states of the provisioning state machine."""

    PROVISIONED = "provisioned"
    INITIALIZED_EMPTY = "initialized_empty"
    TARGET_DIRECTORY_EXISTS = "target_directory_exists"
    NESTED_PROVISIONING = "nested_provisioning"
    DIRECTORY_CREATION_FAILED = "directory_creation_failed"
    METADATA_WRITE_FAILED = "metadata_write_failed"
    ENVIRONMENT_NOT_FOUND = "environment_not_found"
    REMOTE_CONNECTION_FAILED = "remote_connection_failed"
    CLONE_FAILED = "clone_failed"
    REPOSITORY_SETUP_FAILED = "repository_setup_failed"

    @property
    def succeeded(self) -> bool:
        return self in (OutcomeKind.PROVISIONED, OutcomeKind.INITIALIZED_EMPTY)


@dataclass(frozen=True, slots=True)
class ProvisionOutcome:
    """Terminal result of one provisioning run.

    Attributes:
        kind: Which terminal state was reached.
        directory: The target directory. Absolute for successful runs; on
            failure it is the path as requested and no longer exists (except
            for TARGET_DIRECTORY_EXISTS, where it belongs to someone else).
        environment: Selected environment once selection has happened, or
            the requested environment for ENVIRONMENT_NOT_FOUND.
        repository_path: Working copy location for successful runs.
        detail: Diagnostic text for failures (not user-facing wording).
        enclosing_root: Project root that blocked a nested run.
        available_environments: Known environments when the requested one
            was not found.
    """

    kind: OutcomeKind
    directory: Path
    environment: str | None = None
    repository_path: Path | None = None
    detail: str | None = None
    enclosing_root: Path | None = None
    available_environments: tuple[str, ...] = field(default_factory=tuple)

    @property
    def succeeded(self) -> bool:
        return self.kind.succeeded


class BuildStatus(str, Enum):
    """What happened to the initial build."""

    NOT_APPLICABLE = "not_applicable"
    SKIPPED = "skipped"
    SKIPPED_EMPTY = "skipped_empty"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class BuildReport:
    """Build status plus the warning to show for a failed build."""

    status: BuildStatus
    warning: str | None = None


@dataclass(frozen=True, slots=True)
class GetResult:
    """Everything the presenter needs to report on a get run.

    Attributes:
        project_title: Title of the provisioned project.
        outcome: Terminal state of the provisioning state machine.
        build: What happened to the initial build.
    """

    project_title: str
    outcome: ProvisionOutcome
    build: BuildReport = field(
        default_factory=lambda: BuildReport(status=BuildStatus.NOT_APPLICABLE)
    )

    @property
    def succeeded(self) -> bool:
        return self.outcome.succeeded
