"""Root CLI entry point — ``rbd-form`` command group."""

from __future__ import annotations

import functools
from typing import Any

import click
from pydantic import ValidationError
from rich.console import Console

from rbd_form import __version__
from rbd_form.cli._context import CliContext
from rbd_form.exceptions import ConfigError, RbdFormError
from rbd_form.observability import configure_logging
from rbd_form.settings import EngineSettings

# ---------------------------------------------------------------------------
# Error-handling decorator
# ---------------------------------------------------------------------------


def handle_errors(fn: Any) -> Any:
    """Catch engine exceptions and render user-friendly messages."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except click.exceptions.Exit:
            raise
        except ConfigError as exc:
            _die(f"Configuration error: {exc}")
        except RbdFormError as exc:
            _die(str(exc))
        except click.ClickException:
            raise

    return wrapper


def _die(message: str) -> None:
    raise click.ClickException(message)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--catalog",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML feature catalog (defaults to the built-in one).",
)
@click.option("--json", "json_mode", is_flag=True, default=False, help="Output raw JSON.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log engine decisions.")
@click.version_option(version=__version__, prog_name="rbd-form")
@click.pass_context
def cli(ctx: click.Context, catalog: str | None, json_mode: bool, verbose: bool) -> None:
    """Plan RBD image features and check size/striping parameters."""
    overrides: dict[str, Any] = {}
    if catalog is not None:
        overrides["catalog_path"] = catalog
    if verbose:
        overrides["log_level"] = "DEBUG"
    try:
        settings = EngineSettings(**overrides)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid settings: {exc}") from exc

    configure_logging(settings)
    ctx.obj = CliContext(
        console=Console(),
        err_console=Console(stderr=True),
        json_mode=json_mode,
        settings=settings,
    )


# ---------------------------------------------------------------------------
# Register command groups (lazy imports to keep startup fast)
# ---------------------------------------------------------------------------


def _register_commands() -> None:
    from rbd_form.cli.commands.features import features_group
    from rbd_form.cli.commands.sizes import convert_cmd, validate_cmd

    cli.add_command(features_group)
    cli.add_command(validate_cmd)
    cli.add_command(convert_cmd)


_register_commands()
