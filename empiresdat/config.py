"""Default paths and constants for empires.dat decoding."""
from pathlib import Path


def find_dat_file(data_dir: Path) -> Path | None:
    """Return the empires.dat inside a game data directory, if present.

    The original install ships the file as ``data/Empires.dat`` on
    case-insensitive filesystems, so both spellings are checked.
    """
    for name in ("empires.dat", "Empires.dat"):
        p = data_dir / name
        if p.exists():
            return p
    return None


# empires.dat format constants
DEFAULT_ENCODING = "latin-1"   # unit names are single-byte Windows text
RAW_DEFLATE_WBITS = -15        # zlib stream without header or checksum

RESOURCE_STORAGE_COUNT = 3     # fixed, not length-prefixed
RESOURCE_COST_COUNT = 3        # fixed, not length-prefixed
GRAPHIC_DISPLACEMENT_COUNT = 3

FLOAT_PRECISION = 4            # decimals used when flattening floats to text
