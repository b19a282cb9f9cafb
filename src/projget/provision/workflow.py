"""The get workflow: provision a project, then maybe build it."""

from __future__ import annotations

from pathlib import Path

from projget.exceptions import ProjgetError
from projget.logging import get_logger
from projget.project.models import ProjectDescriptor
from projget.provision.build import BuildTrigger
from projget.provision.machine import ProvisioningStateMachine
from projget.provision.models import (
    BuildReport,
    BuildStatus,
    GetResult,
    OutcomeKind,
    ProvisionOutcome,
)
from projget.staging.filesystem import FilesystemStaging

logger = get_logger(__name__)

__all__ = ["provision_project"]


def provision_project(
    machine: ProvisioningStateMachine,
    trigger: BuildTrigger | None,
    staging: FilesystemStaging,
    descriptor: ProjectDescriptor,
    target_directory: Path,
    environment: str | None = None,
    *,
    no_build: bool = False,
    include_inactive: bool = False,
) -> GetResult:
    """Provision ``descriptor`` into ``target_directory`` and build it.

    The build only runs for a PROVISIONED outcome whose working copy holds
    more than version-control metadata. A failing build never changes the
    outcome; it is reported as a warning.

    Args:
        machine: The provisioning state machine.
        trigger: Build trigger, or None when no build is configured.
        staging: Used to inspect the cloned working copy.
        descriptor: The resolved remote project.
        target_directory: Project root to create.
        environment: Explicitly requested environment.
        no_build: Skip the build.
        include_inactive: Offer inactive environments when prompting.

    Returns:
        The outcome together with the build report.
    """
    outcome = machine.provision(
        descriptor,
        target_directory,
        environment,
        include_inactive=include_inactive,
    )
    build = _run_build(outcome, trigger, staging, no_build=no_build)
    return GetResult(project_title=descriptor.title, outcome=outcome, build=build)


def _run_build(
    outcome: ProvisionOutcome,
    trigger: BuildTrigger | None,
    staging: FilesystemStaging,
    *,
    no_build: bool,
) -> BuildReport:
    if outcome.kind is not OutcomeKind.PROVISIONED:
        return BuildReport(status=BuildStatus.NOT_APPLICABLE)
    if no_build or trigger is None:
        logger.debug("build_skipped", requested=no_build)
        return BuildReport(status=BuildStatus.SKIPPED)

    assert outcome.repository_path is not None
    assert outcome.environment is not None
    if staging.contains_only_metadata(outcome.repository_path):
        logger.info("build_skipped_empty", path=str(outcome.repository_path))
        return BuildReport(status=BuildStatus.SKIPPED_EMPTY)

    try:
        trigger.build(outcome.directory, outcome.environment)
    except ProjgetError as e:
        logger.warning("build_failed", error=e.message)
        return BuildReport(status=BuildStatus.FAILED, warning=e.message)
    except Exception as e:
        logger.warning("build_failed", error=str(e), exc_info=True)
        return BuildReport(status=BuildStatus.FAILED, warning=str(e))

    return BuildReport(status=BuildStatus.SUCCEEDED)
