"""``rbd-form features`` — inspect the catalog and replay feature toggles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from rbd_form.cli._output import print_result
from rbd_form.cli.main import handle_errors
from rbd_form.features import FeatureGraph

if TYPE_CHECKING:
    from rbd_form.cli._context import CliContext

_ON = {"on", "true", "1", "yes"}
_OFF = {"off", "false", "0", "no"}


def _parse_op(op: str) -> tuple[str, bool]:
    key, sep, raw = op.partition("=")
    value = raw.strip().lower()
    if not sep or not key.strip() or value not in _ON | _OFF:
        raise click.BadParameter(f"expected KEY=on|off, got {op!r}", param_hint="OPS")
    return key.strip(), value in _ON


@click.group("features")
def features_group() -> None:
    """Feature catalog and dependency rules."""


@features_group.command("list")
@click.pass_obj
@handle_errors
def features_list(ctx: CliContext) -> None:
    """List feature descriptors."""
    rows = [d.model_dump() for d in ctx.settings.descriptors()]
    print_result(
        ctx,
        rows,
        columns=[
            ("Feature", "key"),
            ("Requires", "requires"),
            ("Allow enable", "allow_enable"),
            ("Allow disable", "allow_disable"),
            ("Description", "description"),
        ],
        title="Features",
    )


@features_group.command("toggle")
@click.argument("ops", nargs=-1)
@click.option(
    "--baseline",
    "-b",
    multiple=True,
    help="Feature present on the image being edited (repeatable). Enables edit mode.",
)
@click.pass_obj
@handle_errors
def features_toggle(ctx: CliContext, ops: tuple[str, ...], baseline: tuple[str, ...]) -> None:
    """Apply KEY=on|off toggles in order and show the resulting controls."""
    parsed = [_parse_op(op) for op in ops]

    graph = FeatureGraph(ctx.settings.descriptors())
    if baseline:
        graph.set_baseline(baseline)
    else:
        graph.set_defaults_mode(False)

    rejected: list[str] = []
    for key, checked in parsed:
        if not graph.request_toggle(key, checked).accepted:
            rejected.append(key)

    snapshot = graph.snapshot()
    rows: list[dict[str, Any]] = [
        {"key": key, "value": control.value, "state": str(control.state)}
        for key, control in snapshot.features.items()
    ]
    if ctx.json_mode:
        print_result(ctx, {"features": rows, "rejected": rejected})
        return

    print_result(
        ctx,
        rows,
        columns=[("Feature", "key"), ("On", "value"), ("State", "state")],
        title=f"Features ({graph.mode})",
    )
    if rejected:
        ctx.err_console.print(f"[yellow]Rejected: {', '.join(rejected)}[/yellow]")
