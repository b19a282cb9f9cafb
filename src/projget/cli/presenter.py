"""User-facing wording for get runs.

Turns a :class:`~projget.provision.models.GetResult` into the messages the
``get`` command prints, plus the exit code. Nothing below the CLI layer
produces user-facing text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from projget.cli.context import ExitCode
from projget.cli.output import format_error, format_success, format_warning
from projget.config import DEFAULT_REMOTE_NAME
from projget.provision.models import BuildStatus, GetResult, OutcomeKind

__all__ = [
    "CREDENTIALS_HINT",
    "Message",
    "MessageLevel",
    "exit_code_for",
    "missing_project_message",
    "present",
]

#: Suggestion shown when the remote could not be reached or cloned.
CREDENTIALS_HINT = "Please check your SSH credentials or contact support"


class MessageLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Message:
    """One block of output.

    Attributes:
        level: Severity; WARNING and ERROR go to stderr.
        text: Fully formatted text.
    """

    level: MessageLevel
    text: str

    @property
    def to_stderr(self) -> bool:
        return self.level in (MessageLevel.WARNING, MessageLevel.ERROR)


def _info(text: str) -> Message:
    return Message(MessageLevel.INFO, text)


def _error(
    text: str, details: list[str] | None = None, suggestion: str | None = None
) -> Message:
    return Message(MessageLevel.ERROR, format_error(text, details, suggestion))


def missing_project_message() -> Message:
    return _error(
        "You must specify a project.",
        suggestion="Pass a project ID, e.g. 'projget get <project-id>'",
    )


def present(
    result: GetResult,
    *,
    display_name: str,
    remote_name: str = DEFAULT_REMOTE_NAME,
) -> list[Message]:
    """Describe a get run.

    Args:
        result: Outcome and build report of the run.
        display_name: The project directory as the user gave it.
        remote_name: Name of the remote registered in the working copy.

    Returns:
        Messages in print order.
    """
    outcome = result.outcome
    kind = outcome.kind

    if kind is OutcomeKind.TARGET_DIRECTORY_EXISTS:
        return [_error(f"The project directory '{display_name}' already exists.")]

    if kind is OutcomeKind.NESTED_PROVISIONING:
        details = (
            [f"Enclosing project: {outcome.enclosing_root}"]
            if outcome.enclosing_root
            else None
        )
        return [_error("A project cannot be cloned inside another project.", details)]

    if kind is OutcomeKind.DIRECTORY_CREATION_FAILED:
        return [
            _error(
                f"Failed to create project directory: {display_name}",
                [outcome.detail] if outcome.detail else None,
            )
        ]

    if kind is OutcomeKind.METADATA_WRITE_FAILED:
        return [
            _error(
                f"Failed to write project metadata in: {display_name}",
                [outcome.detail] if outcome.detail else None,
            )
        ]

    if kind is OutcomeKind.ENVIRONMENT_NOT_FOUND:
        details = (
            [f"Available environments: {', '.join(outcome.available_environments)}"]
            if outcome.available_environments
            else None
        )
        return [_error(f"Environment not found: {outcome.environment}", details)]

    if kind is OutcomeKind.REMOTE_CONNECTION_FAILED:
        return [
            _error(
                "Failed to connect to the Git server",
                suggestion=CREDENTIALS_HINT,
            )
        ]

    if kind is OutcomeKind.CLONE_FAILED:
        return [
            _error(
                "Failed to clone Git repository",
                [f"Environment: {outcome.environment}"]
                if outcome.environment
                else None,
                suggestion=CREDENTIALS_HINT,
            )
        ]

    if kind is OutcomeKind.REPOSITORY_SETUP_FAILED:
        return [
            _error(
                f"Failed to set up the Git repository in: {display_name}",
                [outcome.detail] if outcome.detail else None,
            )
        ]

    messages = [_info(f"Created project directory: {display_name}")]

    if kind is OutcomeKind.INITIALIZED_EMPTY:
        messages.extend(
            [
                _info("Initialized empty project repository."),
                _info(f"Added remote endpoint '{remote_name}' to Git."),
                Message(
                    MessageLevel.SUCCESS,
                    format_success(
                        "Your repository has been initialized and connected to "
                        f"'{remote_name}'!"
                    ),
                ),
                _info(
                    f"Commit and push to the {outcome.environment} branch and "
                    "your project will be built automatically."
                ),
            ]
        )
        return messages

    messages.append(
        Message(
            MessageLevel.SUCCESS,
            format_success(
                f"The project {result.project_title} was successfully downloaded "
                f"to: {display_name}"
            ),
        )
    )

    build = result.build
    if build.status is BuildStatus.SKIPPED_EMPTY:
        messages.append(_info("The repository is empty; the build was skipped."))
    elif build.status is BuildStatus.SUCCEEDED:
        messages.append(_info("The project was built successfully."))
    elif build.status is BuildStatus.FAILED:
        details = build.warning.splitlines() if build.warning else None
        messages.append(
            Message(
                MessageLevel.WARNING,
                format_warning("The build failed with an error", details),
            )
        )
    return messages


def exit_code_for(result: GetResult) -> ExitCode:
    """Successful outcomes exit 0 even when the build failed."""
    return ExitCode.SUCCESS if result.succeeded else ExitCode.FAILURE
