"""Little-endian primitive reads over a seekable binary stream."""
from __future__ import annotations

import struct
from typing import BinaryIO, Callable, TypeVar

from empiresdat.config import DEFAULT_ENCODING
from empiresdat.dat.errors import InvalidStringEncoding, UnexpectedEndOfStream

T = TypeVar("T")

# Struct formats (little-endian)
_I8 = struct.Struct("<b")
_U8 = struct.Struct("<B")
_I16 = struct.Struct("<h")
_U16 = struct.Struct("<H")
_I32 = struct.Struct("<i")
_U32 = struct.Struct("<I")
_F32 = struct.Struct("<f")


class DatStream:
    """Sequential typed reader over a binary file object.

    Every read advances the cursor by the width of the value. A read that
    cannot be satisfied in full raises UnexpectedEndOfStream; after that the
    cursor position is undefined and the stream should be discarded.
    """

    def __init__(self, raw: BinaryIO, encoding: str = DEFAULT_ENCODING):
        self.raw = raw
        self.encoding = encoding

    def tell(self) -> int:
        return self.raw.tell()

    def seek(self, offset: int) -> None:
        self.raw.seek(offset)

    def at_end(self) -> bool:
        """True when no bytes remain. Does not move the cursor."""
        pos = self.raw.tell()
        more = self.raw.read(1)
        self.raw.seek(pos)
        return not more

    def read_bytes(self, size: int) -> bytes:
        offset = self.raw.tell()
        data = self.raw.read(size)
        if len(data) != size:
            raise UnexpectedEndOfStream(offset, size, len(data))
        return data

    def skip(self, size: int) -> None:
        """Consume and discard `size` bytes of an unknown field."""
        self.read_bytes(size)

    def _unpack(self, fmt: struct.Struct):
        return fmt.unpack(self.read_bytes(fmt.size))[0]

    def read_i8(self) -> int:
        return self._unpack(_I8)

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_i16(self) -> int:
        return self._unpack(_I16)

    def read_u16(self) -> int:
        return self._unpack(_U16)

    def read_i32(self) -> int:
        return self._unpack(_I32)

    def read_u32(self) -> int:
        return self._unpack(_U32)

    def read_f32(self) -> float:
        return self._unpack(_F32)

    def read_bool_u8(self) -> bool:
        return self.read_u8() != 0

    def read_bool_u16(self) -> bool:
        return self.read_u16() != 0

    def read_sized_str(self, length: int) -> str:
        """Read `length` bytes as text, dropping trailing NUL padding."""
        offset = self.raw.tell()
        data = self.read_bytes(length)
        try:
            text = data.decode(self.encoding)
        except UnicodeDecodeError:
            raise InvalidStringEncoding(offset, self.encoding, data) from None
        return text.rstrip("\x00")

    def read_array(self, count: int, read_entry: Callable[[DatStream], T]) -> tuple[T, ...]:
        """Decode exactly `count` entries with `read_entry`, preserving order."""
        return tuple(read_entry(self) for _ in range(count))
