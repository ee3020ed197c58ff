"""Shared console, spinner and logging setup."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)

SPINNER = "dots4"
SPINNER_MESSAGE = "Querying API"


@contextmanager
def spinner(enabled: bool) -> Iterator[None]:
    """Show a transient spinner around a blocking call when enabled."""
    if not enabled:
        yield
        return
    with console.status(SPINNER_MESSAGE, spinner=SPINNER):
        yield


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO; keep it quiet unless debugging
    logging.getLogger("httpx").setLevel(level)
