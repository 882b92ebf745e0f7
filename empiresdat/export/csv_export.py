"""Export decoded units as CSV."""
from __future__ import annotations

import csv
import io
from typing import Iterable, Optional

from empiresdat.dat.enums import UnitCategory
from empiresdat.dat.fields import SUMMARY_COLUMNS, summary_row, unit_fields
from empiresdat.dat.unit import Unit


def export_csv(units: Iterable[Unit], category: Optional[UnitCategory] = None) -> str:
    """Export one summary row per unit as a CSV string."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")

    # Header
    writer.writerow(SUMMARY_COLUMNS)

    for unit in units:
        if category is not None and unit.category != category:
            continue
        writer.writerow(summary_row(unit))

    return output.getvalue()


def export_fields_csv(units: Iterable[Unit]) -> str:
    """Export every flattened field as (unit_id, field_name, field_value, field_type) rows."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["unit_id", "field_name", "field_value", "field_type"])
    for unit in units:
        writer.writerows(unit_fields(unit))
    return output.getvalue()
