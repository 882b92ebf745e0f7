"""Exceptions raised while decoding empires.dat unit records."""
from __future__ import annotations


class FormatError(ValueError):
    """Base class for structural decode failures."""


class InvalidCategoryTag(FormatError):
    """The leading type byte of a unit record is not a known category code."""

    def __init__(self, tag: int):
        self.tag = tag
        super().__init__(f"Invalid unit category tag: {tag}")


class UnexpectedEndOfStream(FormatError):
    """A primitive read ran out of bytes."""

    def __init__(self, offset: int, wanted: int, got: int):
        self.offset = offset
        self.wanted = wanted
        self.got = got
        super().__init__(
            f"Unexpected end of stream at offset {offset}: "
            f"wanted {wanted} bytes, got {got}"
        )


class InvalidStringEncoding(FormatError):
    """A sized string could not be decoded with the requested encoding."""

    def __init__(self, offset: int, encoding: str, raw: bytes):
        self.offset = offset
        self.encoding = encoding
        self.raw = raw
        super().__init__(
            f"Cannot decode {len(raw)}-byte string at offset {offset} as {encoding}: {raw!r}"
        )
