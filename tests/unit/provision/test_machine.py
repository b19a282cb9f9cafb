"""Unit tests for ProvisioningStateMachine.

The first half drives the machine with a mocked gateway to pin down ordering
and rollback; the scenario tests at the end run real git against bare
remotes.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, call, patch

import pytest
from git import Repo

from projget.exceptions import GitError, GitNotFoundError
from projget.git import GitGateway, RemoteRepositoryState
from projget.project import (
    PROJECT_META_FILE,
    EnvironmentInfo,
    LocalProjectRegistry,
    ProjectDescriptor,
    ProjectResolver,
    read_project_metadata,
    write_project_metadata,
)
from projget.provision import OutcomeKind, ProvisioningStateMachine
from projget.staging import FilesystemStaging

URL = "git@git.example.com:demo.git"


def _fake_clone(url: str, destination: Path, branch: str) -> bool:
    (destination / ".git").mkdir(parents=True)
    (destination / "README.md").write_text(f"{branch}\n")
    return True


@pytest.fixture
def descriptor() -> ProjectDescriptor:
    return ProjectDescriptor(
        id="demo", title="Demo shop", git_url=URL, api_host="api.example.com"
    )


@pytest.fixture
def gateway() -> MagicMock:
    gateway = MagicMock(spec=GitGateway)
    gateway.probe_head.return_value = RemoteRepositoryState.POPULATED
    gateway.clone_repository.side_effect = _fake_clone
    return gateway


@pytest.fixture
def resolver() -> MagicMock:
    resolver = MagicMock(spec=ProjectResolver)
    resolver.get_environments.return_value = {
        "master": EnvironmentInfo(id="master", title="Master"),
        "staging": EnvironmentInfo(id="staging", title="Staging"),
    }
    return resolver


@pytest.fixture
def registry() -> LocalProjectRegistry:
    return LocalProjectRegistry()


@pytest.fixture
def machine(
    gateway: MagicMock, resolver: MagicMock, registry: LocalProjectRegistry
) -> ProvisioningStateMachine:
    return ProvisioningStateMachine(gateway, FilesystemStaging(), registry, resolver)


# =============================================================================
# Preconditions
# =============================================================================


class TestPreconditions:
    def test_target_exists(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        target = temp_dir / "demo"
        target.mkdir()
        (target / "keep.txt").write_text("mine")

        outcome = machine.provision(descriptor, target)

        assert outcome.kind is OutcomeKind.TARGET_DIRECTORY_EXISTS
        assert not outcome.succeeded
        assert (target / "keep.txt").read_text() == "mine"
        assert not (target / PROJECT_META_FILE).exists()
        gateway.probe_head.assert_not_called()

    def test_target_is_a_file(
        self,
        machine: ProvisioningStateMachine,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        target = temp_dir / "demo"
        target.write_text("not a directory")

        outcome = machine.provision(descriptor, target)

        assert outcome.kind is OutcomeKind.TARGET_DIRECTORY_EXISTS
        assert target.read_text() == "not a directory"

    def test_nested_in_registered_root(
        self,
        machine: ProvisioningStateMachine,
        registry: LocalProjectRegistry,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        existing = temp_dir / "existing"
        (existing / "repository").mkdir(parents=True)
        registry.register(existing)

        target = existing / "repository" / "demo"
        outcome = machine.provision(descriptor, target)

        assert outcome.kind is OutcomeKind.NESTED_PROVISIONING
        assert outcome.enclosing_root == existing
        assert not target.exists()
        gateway.probe_head.assert_not_called()

    def test_nested_in_project_found_on_disk(
        self,
        machine: ProvisioningStateMachine,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        existing = temp_dir / "existing"
        existing.mkdir()
        write_project_metadata(existing, descriptor)

        outcome = machine.provision(descriptor, existing / "demo")

        assert outcome.kind is OutcomeKind.NESTED_PROVISIONING
        assert not (existing / "demo").exists()

    def test_sibling_of_project_is_allowed(
        self,
        machine: ProvisioningStateMachine,
        registry: LocalProjectRegistry,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        existing = temp_dir / "existing"
        existing.mkdir()
        registry.register(existing)

        outcome = machine.provision(descriptor, temp_dir / "demo")

        assert outcome.kind is OutcomeKind.PROVISIONED


# =============================================================================
# Failures inside the staging transaction
# =============================================================================


class TestRollback:
    def test_directory_creation_failure(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        target = temp_dir / "missing-parent" / "demo"

        outcome = machine.provision(descriptor, target)

        assert outcome.kind is OutcomeKind.DIRECTORY_CREATION_FAILED
        assert outcome.detail
        assert not (temp_dir / "missing-parent").exists()
        gateway.probe_head.assert_not_called()

    def test_metadata_write_failure(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        with patch(
            "projget.provision.machine.write_project_metadata",
            side_effect=OSError("disk full"),
        ):
            outcome = machine.provision(descriptor, temp_dir / "demo")

        assert outcome.kind is OutcomeKind.METADATA_WRITE_FAILED
        assert "disk full" in (outcome.detail or "")
        assert not (temp_dir / "demo").exists()
        gateway.probe_head.assert_not_called()

    def test_unknown_environment(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        outcome = machine.provision(descriptor, temp_dir / "demo", "prod")

        assert outcome.kind is OutcomeKind.ENVIRONMENT_NOT_FOUND
        assert outcome.environment == "prod"
        assert outcome.available_environments == ("master", "staging")
        assert not (temp_dir / "demo").exists()
        gateway.probe_head.assert_not_called()

    def test_unreachable_remote(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        gateway.probe_head.return_value = RemoteRepositoryState.UNREACHABLE

        outcome = machine.provision(descriptor, temp_dir / "demo")

        assert outcome.kind is OutcomeKind.REMOTE_CONNECTION_FAILED
        assert outcome.environment == "master"
        assert not (temp_dir / "demo").exists()
        gateway.clone_repository.assert_not_called()
        gateway.init_repository.assert_not_called()
        gateway.ensure_remote.assert_not_called()

    def test_clone_failure_removes_partial_clone(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        def partial_clone(url: str, destination: Path, branch: str) -> bool:
            (destination / ".git" / "objects").mkdir(parents=True)
            return False

        gateway.clone_repository.side_effect = partial_clone

        outcome = machine.provision(descriptor, temp_dir / "demo", "staging")

        assert outcome.kind is OutcomeKind.CLONE_FAILED
        assert outcome.environment == "staging"
        assert not (temp_dir / "demo").exists()
        gateway.ensure_remote.assert_not_called()

    def test_init_failure_is_an_outcome(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        gateway.probe_head.return_value = RemoteRepositoryState.EMPTY
        gateway.init_repository.side_effect = GitError("init failed", operation="init")

        outcome = machine.provision(descriptor, temp_dir / "demo")

        assert outcome.kind is OutcomeKind.REPOSITORY_SETUP_FAILED
        assert not outcome.succeeded
        assert "init failed" in (outcome.detail or "")
        assert not (temp_dir / "demo").exists()
        gateway.ensure_remote.assert_not_called()

    def test_remote_failure_on_empty_remote_is_an_outcome(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        gateway.probe_head.return_value = RemoteRepositoryState.EMPTY
        gateway.ensure_remote.side_effect = GitError("remote add failed")

        outcome = machine.provision(descriptor, temp_dir / "demo")

        assert outcome.kind is OutcomeKind.REPOSITORY_SETUP_FAILED
        assert outcome.environment == "master"
        assert not (temp_dir / "demo").exists()

    def test_remote_failure_after_clone_is_an_outcome(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        gateway.ensure_remote.side_effect = GitError(
            "Failed to register remote 'platform'", operation="remote"
        )

        outcome = machine.provision(descriptor, temp_dir / "demo")

        assert outcome.kind is OutcomeKind.REPOSITORY_SETUP_FAILED
        assert outcome.repository_path is None
        assert not (temp_dir / "demo").exists()

    def test_repository_directory_failure_is_an_outcome(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        resolver: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        environments = resolver.get_environments.return_value

        def occupy_repository_path(_: ProjectDescriptor) -> object:
            (temp_dir / "demo" / "repository").write_text("in the way\n")
            return environments

        resolver.get_environments.side_effect = occupy_repository_path
        gateway.probe_head.return_value = RemoteRepositoryState.EMPTY

        outcome = machine.provision(descriptor, temp_dir / "demo")

        assert outcome.kind is OutcomeKind.REPOSITORY_SETUP_FAILED
        assert not (temp_dir / "demo").exists()
        gateway.init_repository.assert_not_called()

    def test_unexpected_error_rolls_back_and_propagates(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        gateway.probe_head.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            machine.provision(descriptor, temp_dir / "demo")

        assert not (temp_dir / "demo").exists()

    def test_missing_git_rolls_back_and_propagates(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        gateway.probe_head.side_effect = GitNotFoundError()

        with pytest.raises(GitNotFoundError):
            machine.provision(descriptor, temp_dir / "demo")

        assert not (temp_dir / "demo").exists()

    def test_failed_run_can_be_repeated(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        gateway.probe_head.return_value = RemoteRepositoryState.UNREACHABLE
        assert not machine.provision(descriptor, temp_dir / "demo").succeeded

        gateway.probe_head.return_value = RemoteRepositoryState.POPULATED
        outcome = machine.provision(descriptor, temp_dir / "demo")

        assert outcome.kind is OutcomeKind.PROVISIONED


# =============================================================================
# Successful paths
# =============================================================================


class TestSuccess:
    def test_populated_remote_is_cloned(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        registry: LocalProjectRegistry,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        outcome = machine.provision(descriptor, temp_dir / "demo", "staging")

        root = temp_dir / "demo"
        assert outcome.kind is OutcomeKind.PROVISIONED
        assert outcome.succeeded
        assert outcome.directory == root
        assert outcome.directory.is_absolute()
        assert outcome.environment == "staging"
        assert outcome.repository_path == root / "repository"
        assert gateway.mock_calls == [
            call.probe_head(URL),
            call.clone_repository(URL, root / "repository", "staging"),
            call.ensure_remote(root / "repository", URL),
        ]
        assert registry.known_roots(temp_dir) == [root]

    def test_metadata_written_before_git(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        seen: list[bool] = []
        gateway.probe_head.side_effect = lambda url: (
            seen.append((temp_dir / "demo" / PROJECT_META_FILE).is_file())
            or RemoteRepositoryState.POPULATED
        )

        machine.provision(descriptor, temp_dir / "demo")

        assert seen == [True]
        metadata = read_project_metadata(temp_dir / "demo")
        assert metadata is not None
        assert metadata.id == "demo"
        assert metadata.host == "api.example.com"

    def test_empty_remote_is_initialized(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        gateway.probe_head.return_value = RemoteRepositoryState.EMPTY

        outcome = machine.provision(descriptor, temp_dir / "demo")

        repository = temp_dir / "demo" / "repository"
        assert outcome.kind is OutcomeKind.INITIALIZED_EMPTY
        assert outcome.succeeded
        assert repository.is_dir()
        gateway.init_repository.assert_called_once_with(repository)
        gateway.ensure_remote.assert_called_once_with(repository, URL)
        gateway.clone_repository.assert_not_called()

    def test_default_environment_without_chooser(
        self,
        machine: ProvisioningStateMachine,
        gateway: MagicMock,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        outcome = machine.provision(descriptor, temp_dir / "demo")

        assert outcome.environment == "master"
        assert gateway.clone_repository.call_args.args[2] == "master"

    def test_chooser_selects_environment(
        self,
        gateway: MagicMock,
        resolver: MagicMock,
        registry: LocalProjectRegistry,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        chooser = MagicMock()
        chooser.choose.return_value = "staging"
        machine = ProvisioningStateMachine(
            gateway, FilesystemStaging(), registry, resolver, chooser
        )

        outcome = machine.provision(descriptor, temp_dir / "demo")

        assert outcome.environment == "staging"
        chooser.choose.assert_called_once()

    def test_configured_defaults(
        self,
        gateway: MagicMock,
        resolver: MagicMock,
        registry: LocalProjectRegistry,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        resolver.get_environments.return_value = {}
        machine = ProvisioningStateMachine(
            gateway,
            FilesystemStaging(),
            registry,
            resolver,
            default_environment="main",
            repository_dir="code",
        )

        outcome = machine.provision(descriptor, temp_dir / "demo")

        assert outcome.environment == "main"
        assert outcome.repository_path == temp_dir / "demo" / "code"
        gateway.clone_repository.assert_called_once_with(
            URL, temp_dir / "demo" / "code", "main"
        )

    def test_second_run_inside_first_is_refused(
        self,
        machine: ProvisioningStateMachine,
        descriptor: ProjectDescriptor,
        temp_dir: Path,
    ) -> None:
        assert machine.provision(descriptor, temp_dir / "demo").succeeded

        outcome = machine.provision(descriptor, temp_dir / "demo" / "again")

        assert outcome.kind is OutcomeKind.NESTED_PROVISIONING


# =============================================================================
# Scenarios against real git remotes
# =============================================================================


class TestScenarios:
    @pytest.fixture
    def real_machine(self, resolver: MagicMock) -> ProvisioningStateMachine:
        return ProvisioningStateMachine(
            GitGateway(), FilesystemStaging(), LocalProjectRegistry(), resolver
        )

    @staticmethod
    def _descriptor(url: str) -> ProjectDescriptor:
        return ProjectDescriptor(id="demo", title="Demo shop", git_url=url)

    def test_clone_populated_remote(
        self,
        real_machine: ProvisioningStateMachine,
        populated_remote: Path,
        temp_dir: Path,
    ) -> None:
        outcome = real_machine.provision(
            self._descriptor(str(populated_remote)), temp_dir / "demo", "master"
        )

        repository = temp_dir / "demo" / "repository"
        assert outcome.kind is OutcomeKind.PROVISIONED
        assert (repository / "web" / "index.php").is_file()
        repo = Repo(repository)
        try:
            assert repo.active_branch.name == "master"
            assert [r.name for r in repo.remotes] == ["platform"]
            assert repo.remote("platform").url == str(populated_remote)
        finally:
            repo.close()

    def test_initialize_empty_remote(
        self,
        real_machine: ProvisioningStateMachine,
        empty_remote: Path,
        temp_dir: Path,
    ) -> None:
        outcome = real_machine.provision(
            self._descriptor(str(empty_remote)), temp_dir / "demo"
        )

        repository = temp_dir / "demo" / "repository"
        assert outcome.kind is OutcomeKind.INITIALIZED_EMPTY
        assert (repository / ".git").is_dir()
        repo = Repo(repository)
        try:
            assert repo.remote("platform").url == str(empty_remote)
            assert not repo.head.is_valid()
        finally:
            repo.close()

    def test_unreachable_remote_leaves_nothing(
        self,
        real_machine: ProvisioningStateMachine,
        unreachable_url: str,
        temp_dir: Path,
    ) -> None:
        outcome = real_machine.provision(
            self._descriptor(unreachable_url), temp_dir / "demo"
        )

        assert outcome.kind is OutcomeKind.REMOTE_CONNECTION_FAILED
        assert list(temp_dir.iterdir()) == []

    def test_missing_branch_leaves_nothing(
        self,
        real_machine: ProvisioningStateMachine,
        resolver: MagicMock,
        populated_remote: Path,
        temp_dir: Path,
    ) -> None:
        resolver.get_environments.return_value = {
            "feature": EnvironmentInfo(id="feature", title="Feature"),
        }

        outcome = real_machine.provision(
            self._descriptor(str(populated_remote)), temp_dir / "demo"
        )

        assert outcome.kind is OutcomeKind.CLONE_FAILED
        assert outcome.environment == "feature"
        assert list(temp_dir.iterdir()) == []

    def test_clone_of_metadata_only_remote(
        self,
        real_machine: ProvisioningStateMachine,
        metadata_only_remote: Path,
        temp_dir: Path,
    ) -> None:
        outcome = real_machine.provision(
            self._descriptor(str(metadata_only_remote)), temp_dir / "demo"
        )

        assert outcome.kind is OutcomeKind.PROVISIONED
        assert outcome.repository_path is not None
        assert FilesystemStaging().contains_only_metadata(outcome.repository_path)
