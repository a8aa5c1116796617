"""Shared utilities for CLI commands"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

from formgen import load_config_file

console = Console()
err_console = Console(stderr=True)

LOGGERS = ("formgen", "formactions", "formgencli")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the formgen CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level - shows files written and checked
    - Debug (FORMGEN_DEBUG=1): DEBUG level - shows extraction and rendering
    """
    debug = bool(os.environ.get("FORMGEN_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=err_console,
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    for name in LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.handlers = [handler]
        logger.propagate = False


def read_overrides(config: Optional[Path]) -> Optional[dict[str, Any]]:
    """Raw configuration from the ``--config`` file, if one is given."""
    if config is None:
        return None
    return load_config_file(config)
