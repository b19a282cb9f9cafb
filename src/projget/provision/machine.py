"""The provisioning state machine.

Orchestrates one get run for a resolved project:

    ABSENT --create root--> STAGED --probe--> UNREACHABLE -> rollback
                                          |-> EMPTY     -> init + remote
                                          '-> POPULATED -> clone + remote

Side effects are ordered so that the project root only survives a run that
reaches PROVISIONED or INITIALIZED_EMPTY. Every other terminal state leaves
the filesystem as it was found. Expected failures are raised as
:class:`~projget.exceptions.ProvisionError` inside the staging transaction,
which rolls back, and are then converted into a :class:`ProvisionOutcome`.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from pathlib import Path

from projget.config import DEFAULT_ENVIRONMENT, DEFAULT_REPOSITORY_DIR
from projget.exceptions import (
    CloneError,
    DirectoryCreationError,
    EnvironmentNotFoundError,
    GitError,
    GitNotFoundError,
    MetadataWriteError,
    NestedProvisioningError,
    ProvisionError,
    RemoteConnectionError,
    RepositorySetupError,
    TargetDirectoryExistsError,
)
from projget.git.gateway import GitGateway
from projget.git.models import RemoteRepositoryState
from projget.logging import get_logger
from projget.project.metadata import write_project_metadata
from projget.project.models import ProjectDescriptor
from projget.project.registry import ProjectRootRegistry
from projget.project.resolver import ProjectResolver
from projget.provision.environment import SelectionPrompt, select_environment
from projget.provision.models import OutcomeKind, ProvisionOutcome
from projget.staging.filesystem import FilesystemStaging

logger = get_logger(__name__)

__all__ = ["ProvisioningStateMachine"]

_OUTCOME_KINDS: dict[type[ProvisionError], OutcomeKind] = {
    TargetDirectoryExistsError: OutcomeKind.TARGET_DIRECTORY_EXISTS,
    NestedProvisioningError: OutcomeKind.NESTED_PROVISIONING,
    DirectoryCreationError: OutcomeKind.DIRECTORY_CREATION_FAILED,
    MetadataWriteError: OutcomeKind.METADATA_WRITE_FAILED,
    EnvironmentNotFoundError: OutcomeKind.ENVIRONMENT_NOT_FOUND,
    RemoteConnectionError: OutcomeKind.REMOTE_CONNECTION_FAILED,
    CloneError: OutcomeKind.CLONE_FAILED,
    RepositorySetupError: OutcomeKind.REPOSITORY_SETUP_FAILED,
}


class ProvisioningStateMachine:
    """Provision a local working copy of a remote project.

    Args:
        gateway: Git operations.
        staging: Project root creation and rollback.
        registry: Known project roots, used to refuse nested provisioning.
        resolver: Source of the project's environments.
        chooser: Interactive environment prompt; None disables prompting.
        default_environment: Environment used when nothing else decides.
        repository_dir: Name of the working copy directory inside the root.
    """

    def __init__(
        self,
        gateway: GitGateway,
        staging: FilesystemStaging,
        registry: ProjectRootRegistry,
        resolver: ProjectResolver,
        chooser: SelectionPrompt | None = None,
        *,
        default_environment: str = DEFAULT_ENVIRONMENT,
        repository_dir: str = DEFAULT_REPOSITORY_DIR,
    ) -> None:
        self._gateway = gateway
        self._staging = staging
        self._registry = registry
        self._resolver = resolver
        self._chooser = chooser
        self._default_environment = default_environment
        self._repository_dir = repository_dir

    def provision(
        self,
        descriptor: ProjectDescriptor,
        target_directory: Path,
        requested_environment: str | None = None,
        *,
        include_inactive: bool = False,
    ) -> ProvisionOutcome:
        """Run the state machine to a terminal outcome.

        Args:
            descriptor: The resolved remote project.
            target_directory: Project root to create; must not exist.
            requested_environment: Environment given on the command line.
            include_inactive: Offer inactive environments when prompting.

        Returns:
            The terminal outcome. Only PROVISIONED and INITIALIZED_EMPTY
            leave anything on disk.

        Raises:
            GitNotFoundError: If git is not installed (after rollback).
        """
        log = logger.bind(project_id=descriptor.id, target=str(target_directory))
        environment: str | None = None
        try:
            self._check_preconditions(target_directory)
            with self._staging.transaction(target_directory) as staged:
                root = staged.path
                self._write_metadata(root, descriptor)
                environment = self._select_environment(
                    descriptor, requested_environment, root, include_inactive
                )
                kind = self._materialize(descriptor, root, environment)
                staged.commit()
        except ProvisionError as e:
            kind = _OUTCOME_KINDS.get(type(e))
            if kind is None:
                raise
            log.warning("provision_failed", outcome=kind.value, error=e.message)
            return ProvisionOutcome(
                kind=kind,
                directory=target_directory,
                environment=getattr(e, "environment", environment),
                detail=e.message,
                enclosing_root=getattr(e, "enclosing_root", None),
                available_environments=getattr(e, "available", ()),
            )

        self._registry.register(root)
        repository_path = root / self._repository_dir
        log.info("provision_completed", outcome=kind.value, environment=environment)
        return ProvisionOutcome(
            kind=kind,
            directory=root,
            environment=environment,
            repository_path=repository_path,
        )

    # =====================================================================
    # Steps
    # =====================================================================

    def _check_preconditions(self, target_directory: Path) -> None:
        if target_directory.exists() or target_directory.is_symlink():
            raise TargetDirectoryExistsError(target_directory)

        parent = target_directory.expanduser().absolute().parent
        for root in self._registry.known_roots(parent):
            if self._staging.is_nested(target_directory, [root]):
                raise NestedProvisioningError(target_directory, root)

    def _write_metadata(self, root: Path, descriptor: ProjectDescriptor) -> None:
        try:
            write_project_metadata(root, descriptor)
        except OSError as e:
            raise MetadataWriteError(root, e) from e

    def _select_environment(
        self,
        descriptor: ProjectDescriptor,
        requested: str | None,
        root: Path,
        include_inactive: bool,
    ) -> str:
        environments = self._resolver.get_environments(descriptor)
        try:
            environment = select_environment(
                environments,
                requested,
                default=self._default_environment,
                chooser=self._chooser,
                include_inactive=include_inactive,
            )
        except EnvironmentNotFoundError as e:
            raise EnvironmentNotFoundError(
                e.environment, e.available, directory=root
            ) from e
        logger.debug("environment_selected", environment=environment)
        return environment

    def _materialize(
        self, descriptor: ProjectDescriptor, root: Path, environment: str
    ) -> OutcomeKind:
        url = descriptor.git_url
        repository_path = root / self._repository_dir

        state = self._gateway.probe_head(url)
        if state is RemoteRepositoryState.UNREACHABLE:
            raise RemoteConnectionError(url, directory=root)

        if state is RemoteRepositoryState.EMPTY:
            with self._repository_setup(root):
                repository_path.mkdir()
                self._gateway.init_repository(repository_path)
                self._gateway.ensure_remote(repository_path, url)
            return OutcomeKind.INITIALIZED_EMPTY

        if not self._gateway.clone_repository(url, repository_path, environment):
            raise CloneError(url, environment, directory=root)
        with self._repository_setup(root):
            self._gateway.ensure_remote(repository_path, url)
        return OutcomeKind.PROVISIONED

    @contextlib.contextmanager
    def _repository_setup(self, root: Path) -> Iterator[None]:
        """Turn local git and filesystem failures into RepositorySetupError.

        A missing git installation is not a setup failure and propagates.
        """
        try:
            yield
        except GitNotFoundError:
            raise
        except (GitError, OSError) as e:
            raise RepositorySetupError(root, e) from e
