"""Synthetic unit-record builders shared by the test suite.

Records are assembled field by field with struct.pack in the same order the
decoder reads them, using distinct values so misordered reads show up.
"""
import io
import struct

import pytest

from empiresdat.dat.enums import UnitCategory, capabilities
from empiresdat.dat.stream import DatStream


def pack(fmt: str, *values) -> bytes:
    return struct.pack("<" + fmt, *values)


class RecordBuilder:
    """Byte builders for each block of a unit record."""

    # Expected byte sizes of fixed-layout blocks
    MOTION_SIZE = 21
    COMMANDABLE_HEAD_SIZE = 22
    COMMAND_SIZE = 59
    BATTLE_BASE_SIZE = 57
    PROJECTILE_SIZE = 9
    TRAINABLE_SIZE = 25
    BUILDING_SIZE = 16

    @staticmethod
    def prefix_size(name: bytes, damage_graphic_count: int = 0) -> int:
        return 146 + len(name) + 5 * damage_graphic_count

    @staticmethod
    def common_prefix(category, name: bytes = b"Villager", unit_id: int = 83,
                      hit_points: int = 25, damage_graphics=(), id2: int | None = None,
                      tag: int | None = None) -> bytes:
        out = pack("BH", int(category) if tag is None else tag, len(name))
        # id, language dll name/creation, class, standing graphic, dying graphics x2
        out += pack("7h", unit_id, 5083, 6083, 4, 1388, 1362, 1366)
        out += pack("bhfb", 1, hit_points, 4.0, 0)
        out += pack("3f", 0.2, 0.2, 2.0)
        out += pack("hhbbhB", 420, 1365, 0, 0, 16, 0)
        out += pack("H", 0xBEEF)  # unknown
        out += pack("B", 1)       # enabled
        out += pack("2h2h", -1, -1, -1, -1)
        out += pack("2f", 0.2, 0.2)
        out += pack("bBhbhf", 0, 0, 4, 0, 0, 0.0)
        out += pack("5b", 1, 0, 4, 1, 1)
        out += pack("f", 12345.0)  # unknown
        out += pack("Biii", 0, 10083, 16083, 16000)
        out += pack("BBbb", 0, 1, 2, 3)
        out += pack("bB3f", 1, 0, 0.15, 0.15, 2.0)
        # resource storage x3: type, amount, enabled
        out += pack("hfB", 4, 1.0, 1)
        out += pack("hfB", 11, 1.0, 1)
        out += pack("hfB", 19, 1.0, 0)
        out += pack("B", len(damage_graphics))
        for graphic_id, percent, old_mode, mode in damage_graphics:
            out += pack("hBBB", graphic_id, percent, old_mode, mode)
        out += pack("hhbB", 449, 1378, 0, 0x7F)
        out += name
        out += pack("h", unit_id if id2 is None else id2)
        return out

    @staticmethod
    def motion_block(speed: float = 1.5) -> bytes:
        return (pack("f2hf", speed, 1391, 1392, 0.25)
                + pack("B", 0xAA)          # unknown
                + pack("hBf", -1, 1, 0.5)
                + pack("B", 0xBB))         # unknown

    @staticmethod
    def command_entry(base: int = 100, enabled: int = 1) -> bytes:
        """A command whose i16 fields count up from `base`."""
        return (pack("Hh", enabled, base)
                + pack("B", 0)                          # unknown
                + pack("8h", *range(base + 1, base + 9))
                + pack("3f", 1.0, 2.0, 3.0)
                + pack("B", 0)                          # unknown
                + pack("f", 9.0)                        # unknown
                + pack("b", 4)
                + pack("B", 0)                          # unknown
                + pack("h", base + 9)
                + pack("h", 0)                          # unknown
                + pack("bb", 5, 6)
                + pack("B", 0)                          # unknown
                + pack("6h", *range(base + 10, base + 16)))

    @staticmethod
    def commandable_block(commands=(), count: int | None = None) -> bytes:
        out = pack("hff2hbhhb", 3, 4.0, 1.5, 109, 0, 2, 1394, 1395, 0)
        out += pack("H", len(commands) if count is None else count)
        for entry in commands:
            out += entry
        return out

    @staticmethod
    def battle_block(attacks=(), armors=(), attack_count: int | None = None) -> bytes:
        out = pack("B", 1)
        out += pack("H", len(attacks) if attack_count is None else attack_count)
        for cls, amount in attacks:
            out += pack("hh", cls, amount)
        out += pack("H", len(armors))
        for cls, amount in armors:
            out += pack("hh", cls, amount)
        out += pack("hfff", -1, 7.0, 0.0, 2.0)
        out += pack("hhbh", 241, 80, 0, 5)
        out += pack("3f", 0.0, 0.5, 1.0)
        out += pack("bfhhhff", 0, 1.0, 1374, 2, 3, 7.0, 2.0)
        return out

    @staticmethod
    def projectile_block(arc: float = 0.25) -> bytes:
        return pack("4b", 1, 0, 1, 0) + pack("B", 0) + pack("f", arc)

    @staticmethod
    def trainable_block(costs=((0, 50, 1), (1, 0, 0), (2, 0, 0))) -> bytes:
        out = b""
        for type_id, amount, enabled in costs:
            out += pack("hhh", type_id, amount, enabled)
        out += pack("hhbh", 20, 109, 5, 0)
        return out

    @staticmethod
    def building_block() -> bytes:
        return pack("hbhBhhhhh", 1407, 0, 0, 1, -1, 2, -1, 12, 1408)

    @classmethod
    def unit_record(cls, category: UnitCategory, name: bytes = b"Villager", unit_id: int = 83,
                    commands=(), attacks=((4, 3),), armors=((4, 0), (3, 0))) -> bytes:
        """A complete record for `category` with every block it carries."""
        out = cls.common_prefix(category, name=name, unit_id=unit_id)
        if category in (UnitCategory.TREE, UnitCategory.GRAPHIC_EFFECT):
            return out
        if category in (UnitCategory.FLAG, UnitCategory.UNKNOWN_25):
            out += pack("f", 0.0)
        blocks = {
            "motion": lambda: cls.motion_block(),
            "commandable": lambda: cls.commandable_block(commands),
            "battle": lambda: cls.battle_block(attacks, armors),
            "projectile": lambda: cls.projectile_block(),
            "trainable": lambda: cls.trainable_block(),
            "building": lambda: cls.building_block(),
        }
        for name_ in capabilities(category):
            out += blocks[name_]()
        return out


@pytest.fixture
def builder():
    return RecordBuilder


@pytest.fixture
def make_stream():
    def _make(data: bytes, encoding: str = "latin-1") -> DatStream:
        return DatStream(io.BytesIO(data), encoding=encoding)
    return _make
