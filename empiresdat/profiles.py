"""Config profiles for storing dat file paths and read options."""
from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path

import click

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

_PROFILE_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


@dataclass
class Profile:
    name: str
    dat: Path
    inflate: bool = False
    offset: int = 0          # start of the unit table in the (inflated) data


@dataclass
class Config:
    default_profile: str | None = None
    profiles: dict[str, Profile] = field(default_factory=dict)


def get_config_path() -> Path:
    """Return the TOML config file path via click.get_app_dir."""
    return Path(click.get_app_dir("empdat")) / "config.toml"


def load_config() -> Config:
    """Read TOML config. Returns empty Config if file missing."""
    path = get_config_path()
    if not path.exists():
        return Config()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = Config(default_profile=data.get("default_profile"))
    for name, info in data.get("profiles", {}).items():
        config.profiles[name] = Profile(
            name=name,
            dat=Path(info["dat"]),
            inflate=bool(info.get("inflate", False)),
            offset=int(info.get("offset", 0)),
        )
    return config


def save_config(config: Config) -> Path:
    """Write config to TOML using literal strings for paths."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    if config.default_profile:
        lines.append(f"default_profile = \"{config.default_profile}\"")
    lines.append("")

    for name, profile in config.profiles.items():
        lines.append(f"[profiles.{name}]")
        # Use TOML literal strings (single quotes) so backslashes aren't escapes
        lines.append(f"dat = '{profile.dat}'")
        lines.append(f"inflate = {'true' if profile.inflate else 'false'}")
        lines.append(f"offset = {profile.offset}")
        lines.append("")

    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def validate_profile_name(name: str) -> bool:
    """Check that a profile name is a valid TOML bare key."""
    return bool(_PROFILE_NAME_RE.match(name))


def resolve_profile(dat: Path | None, profile_name: str | None) -> Profile:
    """Resolve the dat source: --dat > --profile > default profile.

    An explicit --dat yields an unnamed profile with default read options.
    Raises click.UsageError with a helpful message if nothing resolves.
    """
    if dat is not None:
        if not dat.exists():
            raise click.UsageError(f"Dat file not found: {dat}")
        return Profile(name="", dat=dat)

    config = load_config()

    name = profile_name or config.default_profile
    if name is None:
        raise click.UsageError(
            "No dat path provided. Either:\n"
            "  1. Run 'empdat init' to set up a profile\n"
            "  2. Pass --dat <path> explicitly\n"
            "  3. Pass --profile <name> to use a named profile"
        )

    profile = config.profiles.get(name)
    if profile is None:
        available = ", ".join(config.profiles) or "(none)"
        raise click.UsageError(
            f"Profile '{name}' not found. Available profiles: {available}"
        )

    if not profile.dat.exists():
        raise click.UsageError(
            f"Dat file not found for profile '{name}': {profile.dat}\n"
            "Run 'empdat init' to update the path."
        )

    return profile
