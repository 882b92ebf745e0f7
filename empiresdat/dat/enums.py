"""Unit category codes and the capability table derived from them."""
from __future__ import annotations

from enum import IntEnum

from empiresdat.dat.errors import InvalidCategoryTag


class UnitCategory(IntEnum):
    """Unit kind stored as the first byte of every unit record."""
    GRAPHIC_EFFECT = 10
    FLAG = 20
    UNKNOWN_25 = 25
    MOVEABLE = 30
    COMMANDABLE = 40
    BATTLE_READY = 50
    PROJECTILE = 60
    TRAINABLE = 70
    BUILDING = 80
    TREE = 90

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: dict[UnitCategory, str] = {
    UnitCategory.GRAPHIC_EFFECT: "graphic_effect",
    UnitCategory.FLAG: "flag",
    UnitCategory.UNKNOWN_25: "unknown_25",
    UnitCategory.MOVEABLE: "moveable",
    UnitCategory.COMMANDABLE: "commandable",
    UnitCategory.BATTLE_READY: "battle_ready",
    UnitCategory.PROJECTILE: "projectile",
    UnitCategory.TRAINABLE: "trainable",
    UnitCategory.BUILDING: "building",
    UnitCategory.TREE: "tree",
}

_BY_CODE: dict[int, UnitCategory] = {c.value: c for c in UnitCategory}


def classify(tag: int) -> UnitCategory:
    """Map a category byte to its UnitCategory, or raise InvalidCategoryTag."""
    category = _BY_CODE.get(tag)
    if category is None:
        raise InvalidCategoryTag(tag)
    return category


def category_from_label(label: str) -> UnitCategory:
    """Resolve a CLI-style label ("battle_ready") or enum name to a category."""
    key = label.strip().lower().replace("-", "_")
    for category, name in CATEGORY_LABELS.items():
        if name == key:
            return category
    raise ValueError(f"Unknown unit category: {label!r}")


# Capability table. Tree is listed wherever the format lists it even though
# read_unit returns before any sub-record is read for trees.
_MOTION = frozenset({
    UnitCategory.MOVEABLE, UnitCategory.COMMANDABLE, UnitCategory.BATTLE_READY,
    UnitCategory.PROJECTILE, UnitCategory.TRAINABLE, UnitCategory.BUILDING,
    UnitCategory.TREE,
})
_COMMANDABLE = frozenset({
    UnitCategory.COMMANDABLE, UnitCategory.BATTLE_READY, UnitCategory.PROJECTILE,
    UnitCategory.TRAINABLE, UnitCategory.BUILDING, UnitCategory.TREE,
})
_BATTLE = frozenset({
    UnitCategory.BATTLE_READY, UnitCategory.PROJECTILE, UnitCategory.TRAINABLE,
    UnitCategory.BUILDING, UnitCategory.TREE,
})
_PROJECTILE = frozenset({UnitCategory.PROJECTILE})
_TRAINABLE = frozenset({UnitCategory.TRAINABLE, UnitCategory.BUILDING, UnitCategory.TREE})
_BUILDING = frozenset({UnitCategory.BUILDING})


def has_motion_params(category: UnitCategory) -> bool:
    return category in _MOTION


def has_commandable_params(category: UnitCategory) -> bool:
    return category in _COMMANDABLE


def has_battle_params(category: UnitCategory) -> bool:
    return category in _BATTLE


def has_projectile_params(category: UnitCategory) -> bool:
    return category in _PROJECTILE


def has_trainable_params(category: UnitCategory) -> bool:
    return category in _TRAINABLE


def has_building_params(category: UnitCategory) -> bool:
    return category in _BUILDING


# Sub-record names in the order they appear in a unit record
CAPABILITY_PREDICATES = (
    ("motion", has_motion_params),
    ("commandable", has_commandable_params),
    ("battle", has_battle_params),
    ("projectile", has_projectile_params),
    ("trainable", has_trainable_params),
    ("building", has_building_params),
)


def capabilities(category: UnitCategory) -> tuple[str, ...]:
    """Names of the sub-records a category carries, in record order."""
    return tuple(name for name, pred in CAPABILITY_PREDICATES if pred(category))
