"""Flatten decoded units into named field rows and plain dicts.

Rows are (unit_id, field_name, field_value, field_type) tuples, with
field_type one of 'int', 'float', 'bool', 'str', 'enum'. Sub-record fields
are prefixed with the sub-record name (``motion.speed``) and sequence
entries with their index (``battle.attacks.0.class``).
"""
from __future__ import annotations

import dataclasses
from typing import Any

from empiresdat.config import FLOAT_PRECISION
from empiresdat.dat.enums import UnitCategory
from empiresdat.dat.unit import Unit

SUB_RECORDS = ("motion", "commandable", "battle", "projectile", "trainable", "building")

# (class, amount) pairs are stored as plain tuples
_PAIR_FIELDS = {"attacks", "armors"}


def format_value(value: Any) -> tuple[str, str]:
    """Return (text, field_type) for a scalar field value."""
    if isinstance(value, UnitCategory):
        return value.label, "enum"
    if isinstance(value, bool):
        return ("1" if value else "0"), "bool"
    if isinstance(value, int):
        return str(value), "int"
    if isinstance(value, float):
        return f"{value:.{FLOAT_PRECISION}f}", "float"
    return str(value), "str"


def _walk(prefix: str, name: str, value: Any, out: list[tuple[str, Any]]) -> None:
    key = f"{prefix}{name}"
    if value is None:
        return
    if dataclasses.is_dataclass(value):
        for f in dataclasses.fields(value):
            _walk(f"{key}.", f.name, getattr(value, f.name), out)
    elif isinstance(value, tuple):
        for i, item in enumerate(value):
            if name in _PAIR_FIELDS:
                out.append((f"{key}.{i}.class", item[0]))
                out.append((f"{key}.{i}.amount", item[1]))
            else:
                _walk(f"{key}.", str(i), item, out)
    else:
        out.append((key, value))


def unit_fields(unit: Unit) -> list[tuple]:
    """Flatten a unit into (unit_id, field_name, field_value, field_type) rows."""
    pairs: list[tuple[str, Any]] = []
    for f in dataclasses.fields(unit):
        _walk("", f.name, getattr(unit, f.name), pairs)

    rows = []
    for name, value in pairs:
        text, ftype = format_value(value)
        rows.append((unit.id, name, text, ftype))
    return rows


def _to_plain(value: Any) -> Any:
    if isinstance(value, UnitCategory):
        return value.label
    if dataclasses.is_dataclass(value):
        return {f.name: _to_plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, tuple):
        return [_to_plain(v) for v in value]
    return value


def unit_to_dict(unit: Unit) -> dict:
    """Nested dict form of a unit; absent sub-records are omitted."""
    data = {}
    for f in dataclasses.fields(unit):
        value = getattr(unit, f.name)
        if f.name in SUB_RECORDS:
            if value is not None:
                data[f.name] = _to_plain(value)
            continue
        data[f.name] = _to_plain(value)
    data["category_code"] = int(unit.category)
    data["capabilities"] = [name for name in SUB_RECORDS if getattr(unit, name) is not None]
    return data


def summary_row(unit: Unit) -> list:
    """Common summary columns used by the CSV export and the CLI listing."""
    speed = unit.speed
    return [
        unit.id,
        unit.id2,
        unit.category.label,
        unit.name,
        unit.class_id,
        unit.hit_points,
        f"{unit.line_of_sight:.{FLOAT_PRECISION}f}",
        "" if speed is None else f"{speed:.{FLOAT_PRECISION}f}",
        "+".join(name for name in SUB_RECORDS if getattr(unit, name) is not None),
    ]


SUMMARY_COLUMNS = [
    "id", "id2", "category", "name", "class_id", "hit_points",
    "line_of_sight", "speed", "capabilities",
]
