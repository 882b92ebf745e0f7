"""Click CLI for decoding empires.dat unit tables."""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

import click

from empiresdat.config import DEFAULT_ENCODING, find_dat_file
from empiresdat.dat.enums import CATEGORY_LABELS, UnitCategory, capabilities, category_from_label
from empiresdat.dat.errors import FormatError
from empiresdat.profiles import (
    Config,
    Profile,
    load_config,
    resolve_profile,
    save_config,
    validate_profile_name,
)


class Context:
    """Holds the resolved dat source derived from --dat / --profile / config."""

    def __init__(self, dat: Path | None = None, profile: str | None = None,
                 inflate: bool = False, encoding: str = DEFAULT_ENCODING):
        self._explicit_dat = dat
        self._profile_name = profile
        self._force_inflate = inflate
        self.encoding = encoding
        self._resolved: Profile | None = None

    @property
    def profile(self) -> Profile:
        if self._resolved is None:
            self._resolved = resolve_profile(self._explicit_dat, self._profile_name)
        return self._resolved

    @property
    def dat(self) -> Path:
        return self.profile.dat

    @property
    def inflate(self) -> bool:
        return self._force_inflate or self.profile.inflate

    def load_units(self, offset: Optional[int], count: Optional[int]):
        """Decode units, turning format errors into a clean CLI failure."""
        from empiresdat.dat.reader import UnitReader

        if offset is None:
            offset = self.profile.offset
        reader = UnitReader(self.dat, inflate=self.inflate, encoding=self.encoding)
        try:
            return reader.read_units(offset, count)
        except FormatError as e:
            raise click.ClickException(f"Decode failed: {e}") from e


pass_ctx = click.make_pass_decorator(Context)

_offset_option = click.option(
    "--offset", type=int, default=None,
    help="Byte offset of the first unit record (default: profile offset, else 0)",
)
_count_option = click.option(
    "--count", "-n", type=int, default=None,
    help="Number of units to decode (default: until end of data)",
)


def _parse_category(value: Optional[str]) -> Optional[UnitCategory]:
    if value is None:
        return None
    try:
        return category_from_label(value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--category") from e


@click.group()
@click.option(
    "--dat", required=False, default=None,
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    help="Path to the unit table / empires.dat (optional if profiles configured)",
)
@click.option(
    "--profile", "-p", default=None, type=str,
    help="Named profile to use (from empdat init)",
)
@click.option("--inflate", is_flag=True, help="Data is raw-deflate compressed")
@click.option("--encoding", default=DEFAULT_ENCODING, show_default=True,
              help="Text encoding of unit names")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="empiresdat")
@click.pass_context
def cli(ctx, dat: Optional[Path], profile: Optional[str], inflate: bool,
        encoding: str, verbose: bool):
    """empdat - empires.dat unit decoder.

    Decode the unit records of an Age of Empires game database, list them,
    inspect single units and export them as JSON or CSV.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj = Context(dat=dat, profile=profile, inflate=inflate, encoding=encoding)


@cli.command()
def init():
    """Set up config profiles for dat paths (interactive)."""
    config = load_config()

    # Show existing profiles
    if config.profiles:
        click.echo("Current profiles:")
        for name, p in config.profiles.items():
            default_marker = " (default)" if name == config.default_profile else ""
            click.echo(f"  {name}: {p.dat}{default_marker}")
        click.echo()
        if not click.confirm("Overwrite existing configuration?", default=False):
            click.echo("Aborted.")
            return
        config = Config()

    click.echo("Set up empdat profiles. Each profile stores a path to a dat file.\n")

    while True:
        default_name = "default" if not config.profiles else None
        name = click.prompt("Profile name", default=default_name).strip()
        if not validate_profile_name(name):
            click.echo(f"Invalid profile name '{name}'. Use letters, digits, hyphens, underscores.")
            continue

        while True:
            dat_str = click.prompt("Path to dat file").strip().strip('"').strip("'")
            dat_path = Path(dat_str)
            if dat_path.is_dir():
                dat_path = find_dat_file(dat_path) or dat_path
            if dat_path.exists() and dat_path.is_file():
                break
            click.echo(f"File not found: {dat_path}")

        inflate = click.confirm("Is the file raw-deflate compressed?", default=False)
        offset = click.prompt("Byte offset of the unit table", default=0, type=int)
        config.profiles[name] = Profile(name=name, dat=dat_path, inflate=inflate, offset=offset)

        if len(config.profiles) == 1:
            config.default_profile = name
        elif click.confirm(f"Set '{name}' as the default profile?", default=False):
            config.default_profile = name

        if not click.confirm("\nAdd another profile?", default=False):
            break
        click.echo()

    if config.default_profile is None and config.profiles:
        config.default_profile = next(iter(config.profiles))

    saved_path = save_config(config)
    click.echo(f"\nConfig saved to {saved_path}\n")

    click.echo("Profiles:")
    for name, p in config.profiles.items():
        default_marker = " (default)" if name == config.default_profile else ""
        click.echo(f"  {name}: {p.dat}{default_marker}")


@cli.command()
def categories():
    """Show unit category codes and the sub-records each carries."""
    click.echo(f"{'Code':>4}  {'Category':<16}  Sub-records")
    click.echo("-" * 72)
    for category in UnitCategory:
        subs = ", ".join(capabilities(category)) or "-"
        click.echo(f"{category.value:>4}  {CATEGORY_LABELS[category]:<16}  {subs}")
    click.echo("\nTree and graphic_effect records end after the common fields.")


@cli.command("units")
@_offset_option
@_count_option
@click.option("--category", "-c", default=None, help="Only show this category (e.g. building)")
@pass_ctx
def list_units(ctx: Context, offset: Optional[int], count: Optional[int], category: Optional[str]):
    """List decoded units, one per line."""
    wanted = _parse_category(category)

    t0 = time.perf_counter()
    units = ctx.load_units(offset, count)
    elapsed = time.perf_counter() - t0

    shown = [u for u in units if wanted is None or u.category == wanted]
    if not shown:
        click.echo("No units found.")
        return

    click.echo(f"{'ID':>5}  {'ID2':>5}  {'Category':<14}  {'HP':>5}  {'Name':<30}")
    click.echo("-" * 68)
    for u in shown:
        click.echo(f"{u.id:>5}  {u.id2:>5}  {u.category.label:<14}  {u.hit_points:>5}  {u.name:<30}")
    click.echo(f"\n{len(shown):,} of {len(units):,} units ({elapsed:.2f}s)")


@cli.command()
@click.argument("unit_id", type=int)
@_offset_option
@_count_option
@pass_ctx
def show(ctx: Context, unit_id: int, offset: Optional[int], count: Optional[int]):
    """Show all decoded fields of one unit."""
    from empiresdat.dat.fields import unit_fields

    units = ctx.load_units(offset, count)
    unit = next((u for u in units if u.id == unit_id), None)
    if unit is None:
        raise click.ClickException(f"Unit {unit_id} not found")

    click.echo(f"Unit {unit.id}: {unit.name} ({unit.category.label})")
    click.echo("-" * 60)
    for _, name, value, ftype in unit_fields(unit):
        click.echo(f"  {name:<48} {value} [{ftype}]")


@cli.command()
@click.option("--format", "fmt", type=click.Choice(["json", "csv", "fields"]), default="json")
@click.option("--output", "-o", "output_path", type=click.Path(), default=None,
              help="Write export to a file instead of stdout")
@click.option("--category", "-c", default=None, help="Only export this category")
@_offset_option
@_count_option
@pass_ctx
def export(ctx: Context, fmt: str, output_path: Optional[str], category: Optional[str],
           offset: Optional[int], count: Optional[int]):
    """Export decoded units as JSON or CSV."""
    from empiresdat.export.csv_export import export_csv, export_fields_csv
    from empiresdat.export.json_export import export_json

    wanted = _parse_category(category)
    units = ctx.load_units(offset, count)

    if fmt == "json":
        text = export_json(units, wanted)
    elif fmt == "csv":
        text = export_csv(units, wanted)
    else:
        text = export_fields_csv(u for u in units if wanted is None or u.category == wanted)

    if output_path:
        Path(output_path).write_text(text, encoding="utf-8")
        click.echo(f"Exported {len(units):,} units to {output_path}")
    else:
        click.echo(text, nl=False)


if __name__ == "__main__":
    cli()
