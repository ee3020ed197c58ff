"""Interactive prompts.

When the config carries ``mock_string`` / ``mock_select`` those answers are
returned without prompting, which is how the tests drive interactive commands.
"""

from collections.abc import Sequence
from typing import TypeVar

import click
from rich import print as rprint
from rich.markup import escape

from lnr.errors import InputError
from lnr.settings import Config

T = TypeVar("T")


def string(desc: str, config: Config) -> str:
    """Get a line of text from the user."""
    if config.mock_string is not None:
        return config.mock_string
    try:
        return click.prompt(desc).strip()
    except click.Abort:
        raise InputError(f"{desc}: no input given") from None


def editor(desc: str, default_text: str, config: Config) -> str:
    """Get a larger amount of text from the user in $EDITOR."""
    if config.mock_string is not None:
        return config.mock_string
    rprint(f"[dim]{escape(desc)}: opening editor…[/dim]")
    try:
        edited = click.edit(default_text, extension=".md")
    except click.ClickException as exc:
        raise InputError(f"{desc}: {exc.format_message()}") from None
    # None means the editor closed without saving
    return default_text if edited is None else edited.rstrip("\n")


def select(desc: str, options: Sequence[T], config: Config) -> T:
    """Pick one of `options`, shown as a numbered list."""
    if not options:
        raise InputError(f"{desc}: nothing to choose from")
    if config.mock_select is not None:
        try:
            return options[config.mock_select]
        except IndexError:
            raise InputError(f"{desc}: mock selection {config.mock_select} out of range") from None

    rprint(f"[bold]{escape(desc)}[/bold]")
    for number, option in enumerate(options, start=1):
        rprint(f"  [cyan]{number}[/cyan]) {escape(str(option))}")
    try:
        choice = click.prompt("Choice", type=click.IntRange(1, len(options)), default=1)
    except click.Abort:
        raise InputError(f"{desc}: no selection made") from None
    return options[choice - 1]
