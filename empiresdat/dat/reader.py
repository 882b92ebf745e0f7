"""Sequential reader for the unit table of an empires.dat file."""
from __future__ import annotations

import io
import logging
import zlib
from collections import Counter
from pathlib import Path
from typing import Iterator, Optional

from empiresdat.config import DEFAULT_ENCODING, RAW_DEFLATE_WBITS
from empiresdat.dat.errors import FormatError
from empiresdat.dat.stream import DatStream
from empiresdat.dat.unit import Unit, read_unit

_log = logging.getLogger("empiresdat")


def inflate_dat(data: bytes) -> bytes:
    """Decompress a raw-deflate blob (empires.dat ships without a zlib header)."""
    try:
        return zlib.decompress(data, RAW_DEFLATE_WBITS)
    except zlib.error as e:
        raise FormatError(f"Cannot inflate dat data: {e}") from e


class UnitReader:
    """Decodes unit records laid out back to back in a dat file.

    The file is read into memory once; `offset` is the position of the first
    unit record in the (decompressed) data. Records are decoded strictly in
    order since each record's length is only known after decoding it.
    """

    def __init__(self, path: Path, inflate: bool = False, encoding: str = DEFAULT_ENCODING):
        self.path = path
        self.inflate = inflate
        self.encoding = encoding
        self._data: Optional[bytes] = None

    @property
    def data(self) -> bytes:
        if self._data is None:
            raw = self.path.read_bytes()
            if self.inflate:
                self._data = inflate_dat(raw)
                _log.debug("inflated %s: %d -> %d bytes", self.path.name, len(raw), len(self._data))
            else:
                self._data = raw
        return self._data

    def iter_units(self, offset: int = 0, count: Optional[int] = None) -> Iterator[Unit]:
        """Yield decoded units starting at `offset`.

        With `count=None`, decodes until the data ends exactly on a record
        boundary. Any decode error propagates; the remaining records are
        not reachable after one fails.
        """
        stream = DatStream(io.BytesIO(self.data), encoding=self.encoding)
        stream.seek(offset)
        index = 0
        while count is None or index < count:
            if count is None and stream.at_end():
                break
            start = stream.tell()
            unit = read_unit(stream)
            _log.debug("unit #%d id=%d %s at offset %d", index, unit.id, unit.category.label, start)
            yield unit
            index += 1

    def read_units(self, offset: int = 0, count: Optional[int] = None) -> list[Unit]:
        """Decode units into a list."""
        return list(self.iter_units(offset, count))


def main():
    """Quick test: decode a unit table and print category counts."""
    import sys
    import time
    if len(sys.argv) < 2:
        print("Usage: python -m empiresdat.dat.reader <path/to/units.bin> [offset] [--inflate]")
        sys.exit(1)

    path = Path(sys.argv[1])
    offset = int(sys.argv[2], 0) if len(sys.argv) > 2 and sys.argv[2] != "--inflate" else 0
    reader = UnitReader(path, inflate="--inflate" in sys.argv)

    start = time.perf_counter()
    units = reader.read_units(offset)
    elapsed = time.perf_counter() - start

    print(f"\nDecoded {len(units):,} units in {elapsed:.2f}s\n")

    counts = Counter(u.category.label for u in units)
    print(f"{'Category':<16} {'Count':>6}")
    print("-" * 24)
    for label, n in counts.most_common():
        print(f"{label:<16} {n:>6,}")

    print("\nSample names:")
    for u in units[:10]:
        print(f"  {u.id:>5} {u.category.label:<14} {u.name}")


if __name__ == "__main__":
    main()
