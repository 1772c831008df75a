"""Shared utilities — console output and file logging for the CLI.

Library code logs through ``logging.getLogger(__name__)``; only the CLI
prints to the console.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel

# ---------------------------------------------------------------------------
# Console singleton
# ---------------------------------------------------------------------------
console = Console()

# ---------------------------------------------------------------------------
# Timestamp for log file naming
# ---------------------------------------------------------------------------
TIMESTAMP = datetime.now().strftime("%Y-%m-%d-%H%M%S")

# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def print_header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold]{title}[/bold]", border_style="blue", expand=True))
    console.print()


def print_info(msg: str) -> None:
    console.print(f"[blue]ℹ {msg}[/blue]")


def print_success(msg: str) -> None:
    console.print(f"[bold green]✔ {msg}[/bold green]")


def print_warning(msg: str) -> None:
    console.print(f"[bold yellow]⚠ {msg}[/bold yellow]")


def print_error(msg: str) -> None:
    console.print(f"[bold red]✖ {msg}[/bold red]")


def die(msg: str, code: int = 1) -> None:
    print_error(msg)
    sys.exit(code)


# ---------------------------------------------------------------------------
# File-based logging
# ---------------------------------------------------------------------------

_log_file: Optional[Path] = None


def init_logging(prefix: str = "armkit", log_dir: Optional[Path] = None) -> Path:
    """Initialise file-based logging for the ``armkit`` logger. Returns the log file path.

    Records at DEBUG are kept only when ``ARMKIT_DEBUG`` is set.
    """
    global _log_file
    from .config import settings

    if log_dir is None:
        log_dir = settings.log_dir

    log_dir.mkdir(parents=True, exist_ok=True)
    _log_file = log_dir / f"{prefix}-{TIMESTAMP}.log"

    logger = logging.getLogger("armkit")
    logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    fh = logging.FileHandler(_log_file)
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(fh)
    return _log_file


def get_log_file() -> Optional[Path]:
    return _log_file
