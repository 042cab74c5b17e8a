"""CLI context object passed through Click's ``ctx.obj``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rich.console import Console

    from rbd_form.settings import EngineSettings


@dataclass
class CliContext:
    """Holds shared state for all CLI commands."""

    console: Console
    err_console: Console
    json_mode: bool
    settings: EngineSettings
