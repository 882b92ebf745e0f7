"""Export decoded units as JSON."""
from __future__ import annotations

import json
from typing import Iterable, Optional

from empiresdat.dat.enums import UnitCategory
from empiresdat.dat.fields import unit_to_dict
from empiresdat.dat.unit import Unit


def export_json(units: Iterable[Unit], category: Optional[UnitCategory] = None) -> str:
    """Export units as a JSON array string."""
    data = [
        unit_to_dict(unit)
        for unit in units
        if category is None or unit.category == category
    ]
    return json.dumps(data, indent=2, ensure_ascii=False)
