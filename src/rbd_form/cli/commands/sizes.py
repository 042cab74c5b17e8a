"""``rbd-form validate`` / ``rbd-form convert`` — size and striping checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rbd_form.cli._output import print_result, print_success
from rbd_form.cli.main import handle_errors
from rbd_form.schemas import NumericFieldSet
from rbd_form.units import from_bytes, parse_bytes
from rbd_form.validation import validate

if TYPE_CHECKING:
    from rbd_form.cli._context import CliContext


@click.command("validate")
@click.option("--size", default=None, help="Image size, e.g. 10GiB.")
@click.option("--object-size", default=None, help="Object size (default from settings).")
@click.option("--striping-unit", default=None, help="Stripe unit, e.g. 64KiB.")
@click.option("--striping-count", default=None, help="Stripe count.")
@click.option("--data-pool", default=None, help="Separate data pool name.")
@click.option("--use-data-pool", is_flag=True, default=False, help="Place data in a data pool.")
@click.pass_obj
@handle_errors
def validate_cmd(
    ctx: CliContext,
    size: str | None,
    object_size: str | None,
    striping_unit: str | None,
    striping_count: str | None,
    data_pool: str | None,
    use_data_pool: bool,
) -> None:
    """Check size and striping parameters against each other."""
    fields = NumericFieldSet(
        size=size,
        object_size=object_size,
        striping_unit=striping_unit,
        striping_count=striping_count,
        use_data_pool=use_data_pool,
        data_pool=data_pool,
    )
    result = validate(fields, default_object_size=ctx.settings.default_object_size)

    if ctx.json_mode:
        print_result(ctx, {"valid": result.is_valid, "errors": result.as_dict()})
    elif result.is_valid:
        print_success(ctx, "Parameters are valid.")
    else:
        print_result(ctx, result.as_dict(), title="Validation errors")

    if not result.is_valid:
        raise click.exceptions.Exit(1)


@click.command("convert")
@click.argument("value")
@click.pass_obj
@handle_errors
def convert_cmd(ctx: CliContext, value: str) -> None:
    """Convert a size string to bytes and back."""
    size = parse_bytes(value)
    print_result(ctx, {"input": value, "bytes": size, "display": from_bytes(size)}, title="Size")
