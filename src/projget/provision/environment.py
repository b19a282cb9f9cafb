"""Environment selection policy.

Decides which environment (branch) a get run checks out. The policy is kept
apart from any prompt: interactive choice is delegated to a
:class:`SelectionPrompt` that the caller may or may not supply.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from projget.exceptions import EnvironmentNotFoundError
from projget.logging import get_logger
from projget.project.models import EnvironmentInfo

logger = get_logger(__name__)

__all__ = [
    "SelectionPrompt",
    "environment_choices",
    "select_environment",
]


@runtime_checkable
class SelectionPrompt(Protocol):
    """Asks the user to pick one key of ``choices``."""

    def choose(
        self, choices: Mapping[str, str], text: str, default: str | None = None
    ) -> str:
        """Return the chosen key.

        Args:
            choices: Mapping of key to display label, in display order.
            text: Question shown above the list.
            default: Key preselected when the user just presses enter.
        """
        ...


def environment_choices(
    environments: Mapping[str, EnvironmentInfo],
    default: str,
    include_inactive: bool = False,
) -> dict[str, str]:
    """Build the list of environments offered to the user.

    The default environment comes first when the project has it. Inactive
    environments are only offered with ``include_inactive``.

    Args:
        environments: The project's environments keyed by id.
        default: Default environment id.
        include_inactive: Also offer environments that are not active yet.

    Returns:
        Mapping of environment id to title, in display order.
    """
    choices: dict[str, str] = {}
    if default in environments:
        choices[default] = environments[default].title
    for env_id, env in environments.items():
        if env_id == default:
            continue
        if env.active or include_inactive:
            choices[env_id] = env.title
    return choices


def select_environment(
    environments: Mapping[str, EnvironmentInfo],
    requested: str | None,
    *,
    default: str,
    chooser: SelectionPrompt | None = None,
    include_inactive: bool = False,
) -> str:
    """Select the environment for a get run.

    Rules, first match wins:

    1. An explicitly requested environment must exist. An empty request
       counts as none.
    2. A project with exactly one environment uses it without prompting.
    3. With environments known and a chooser available, the user picks.
    4. Otherwise the default environment is used.

    Raises:
        EnvironmentNotFoundError: If ``requested`` is not a known environment.
    """
    if requested:
        if requested not in environments:
            raise EnvironmentNotFoundError(requested, tuple(environments))
        return requested

    if len(environments) == 1:
        only = next(iter(environments))
        logger.debug("environment_single", environment=only)
        return only

    if environments and chooser is not None:
        choices = environment_choices(environments, default, include_inactive)
        if len(choices) == 1:
            return next(iter(choices))
        if choices:
            selected = chooser.choose(
                choices,
                "Enter a number to choose which environment to check out:",
                default=default if default in choices else None,
            )
            logger.debug("environment_chosen", environment=selected)
            return selected

    return default
