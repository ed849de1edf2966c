"""Logging configuration for the Lambda runtime and the CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO", rich_output: bool = False) -> None:
    """
    Configure the root logger.

    The Lambda runtime installs its own handler on the root logger, so only the
    level is adjusted when a handler is already present. The CLI asks for a
    RichHandler writing to stderr.
    """
    root = logging.getLogger()
    root.setLevel(level)

    if rich_output:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        root.addHandler(
            RichHandler(
                console=Console(stderr=True),
                show_path=False,
                rich_tracebacks=True,
            )
        )
        return

    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
