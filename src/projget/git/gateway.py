"""GitPython-based gateway for the remote repository operations of a get run.

The gateway covers the four operations the provisioning state machine needs:
probing the remote HEAD, initializing an empty repository, cloning a single
branch and registering the named remote. Network-facing operations report
failure through their return values so the caller can roll back before
anything is surfaced to the user.

Example:
    ```python
    from projget.git import GitGateway, RemoteRepositoryState

    gateway = GitGateway(remote_name="platform")
    if gateway.probe_head(url) is RemoteRepositoryState.POPULATED:
        gateway.clone_repository(url, Path("demo/repository"), "master")
    ```
"""

from __future__ import annotations

from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from git.cmd import Git
from git.exc import GitCommandNotFound

from projget.config import DEFAULT_REMOTE_NAME
from projget.exceptions import GitError, GitNotFoundError, NotARepositoryError
from projget.git.models import RemoteRepositoryState
from projget.logging import get_logger

logger = get_logger(__name__)

__all__ = ["GitGateway", "NONINTERACTIVE_ENV"]

#: Environment applied to network commands so git never blocks on a
#: credential prompt.
NONINTERACTIVE_ENV: dict[str, str] = {"GIT_TERMINAL_PROMPT": "0"}


def _stderr_of(exc: GitCommandError) -> str:
    return str(exc.stderr or exc.stdout or exc).strip()


class GitGateway:
    """Remote repository operations backed by GitPython.

    Args:
        remote_name: Name under which the remote endpoint is registered, both
            by ``clone_repository`` and ``ensure_remote``.
    """

    def __init__(self, remote_name: str = DEFAULT_REMOTE_NAME) -> None:
        self._remote_name = remote_name

    @property
    def remote_name(self) -> str:
        return self._remote_name

    # -------------------------------------------------------------------------
    # Remote probing
    # -------------------------------------------------------------------------

    def probe_head(self, url: str) -> RemoteRepositoryState:
        """Read the remote HEAD reference without cloning.

        Runs ``git ls-remote <url> HEAD``; nothing is written locally or
        remotely.

        Args:
            url: Remote repository URL.

        Returns:
            UNREACHABLE if the command fails, EMPTY if the remote has no HEAD,
            POPULATED otherwise.

        Raises:
            GitNotFoundError: If git is not installed.
        """
        git_cmd = Git()
        git_cmd.update_environment(**NONINTERACTIVE_ENV)
        try:
            output = git_cmd.ls_remote(url, "HEAD")
        except GitCommandNotFound as e:
            raise GitNotFoundError("Git CLI not found. Please install git.") from e
        except GitCommandError as e:
            logger.warning("remote_probe_failed", url=url, error=_stderr_of(e))
            return RemoteRepositoryState.UNREACHABLE

        state = (
            RemoteRepositoryState.POPULATED
            if output.strip()
            else RemoteRepositoryState.EMPTY
        )
        logger.info("remote_probed", url=url, state=state.value)
        return state

    # -------------------------------------------------------------------------
    # Local repository materialization
    # -------------------------------------------------------------------------

    def init_repository(self, path: Path) -> None:
        """Create a fresh repository rooted at ``path``.

        Args:
            path: Existing directory to initialize.

        Raises:
            GitError: If ``path`` already contains a repository or init fails.
            GitNotFoundError: If git is not installed.
        """
        if (path / ".git").exists():
            raise GitError(f"Repository already exists at {path}", operation="init")
        try:
            Repo.init(path)
        except GitCommandNotFound as e:
            raise GitNotFoundError("Git CLI not found. Please install git.") from e
        except GitCommandError as e:
            raise GitError(
                f"Failed to initialize repository at {path}: {_stderr_of(e)}",
                operation="init",
            ) from e
        logger.info("repository_initialized", path=str(path))

    def clone_repository(self, url: str, destination: Path, branch: str) -> bool:
        """Clone the full history of one branch into ``destination``.

        The remote is registered under :attr:`remote_name` instead of the
        default ``origin``.

        Args:
            url: Remote repository URL.
            destination: Directory to clone into; must not exist or be empty.
            branch: Branch (environment) to clone and check out.

        Returns:
            True on success, False if the clone failed. A failed clone may
            leave a partial ``destination`` behind for the caller to remove.

        Raises:
            GitNotFoundError: If git is not installed.
        """
        try:
            Repo.clone_from(
                url,
                destination,
                env=NONINTERACTIVE_ENV,
                branch=branch,
                single_branch=True,
                origin=self._remote_name,
            )
        except GitCommandNotFound as e:
            raise GitNotFoundError("Git CLI not found. Please install git.") from e
        except GitCommandError as e:
            logger.warning(
                "clone_failed",
                url=url,
                branch=branch,
                destination=str(destination),
                error=_stderr_of(e),
            )
            return False

        logger.info(
            "repository_cloned",
            url=url,
            branch=branch,
            destination=str(destination),
        )
        return True

    def ensure_remote(self, path: Path, url: str) -> None:
        """Add the named remote, or point it at ``url`` if it already exists.

        Safe to call repeatedly: at most one remote named :attr:`remote_name`
        exists afterwards.

        Args:
            path: Root of an existing local repository.
            url: Remote repository URL.

        Raises:
            NotARepositoryError: If ``path`` is not a repository.
            GitError: If the remote cannot be written.
        """
        try:
            repo = Repo(path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise NotARepositoryError(f"Not a git repository: {path}", path=path) from e

        try:
            if self._remote_name in [remote.name for remote in repo.remotes]:
                remote = repo.remote(self._remote_name)
                if remote.url != url:
                    remote.set_url(url)
                    logger.info(
                        "remote_updated",
                        name=self._remote_name,
                        url=url,
                        path=str(path),
                    )
                else:
                    logger.debug("remote_unchanged", name=self._remote_name, url=url)
            else:
                repo.create_remote(self._remote_name, url)
                logger.info(
                    "remote_added", name=self._remote_name, url=url, path=str(path)
                )
        except GitCommandError as e:
            raise GitError(
                f"Failed to register remote '{self._remote_name}': {_stderr_of(e)}",
                operation="remote",
            ) from e
        finally:
            repo.close()
