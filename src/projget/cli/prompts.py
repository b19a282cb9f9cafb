"""Interactive choice prompts on the terminal."""

from __future__ import annotations

from collections.abc import Mapping

import click
from rich.console import Console

from projget.cli.console import err_console

__all__ = ["ConsoleChooser"]


class ConsoleChooser:
    """Numbered-list chooser.

    The list is printed to ``console`` and the answer read with
    :func:`click.prompt`, which re-asks until a valid number is entered.

    Args:
        console: Console the list is printed to (stderr by default so that
            piped stdout stays clean).
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or err_console

    def choose(
        self, choices: Mapping[str, str], text: str, default: str | None = None
    ) -> str:
        if not choices:
            raise ValueError("Nothing to choose from")
        keys = list(choices)

        self._console.print(text)
        for number, key in enumerate(keys, start=1):
            self._console.print(
                f"  [{number}] {choices[key]}", markup=False, highlight=False
            )

        default_number = keys.index(default) + 1 if default in keys else None
        answer = click.prompt(
            "Your choice",
            type=click.IntRange(1, len(keys)),
            default=default_number,
            err=True,
        )
        return keys[answer - 1]
