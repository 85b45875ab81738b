"""
Row ordering shared by all scopes.

The key is the (primary family, primary metric) cell recorded when the
grammar was parsed; a percent primary metric sorts by the ratio of the
first percent column. Rows without data sort as the lowest value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from .columns import ColumnSpec, Metric
from .metrics import first_percent_ratio

if TYPE_CHECKING:
    from .entities import EntityRow


def sort_value(row: "EntityRow", spec: ColumnSpec) -> Optional[float]:
    mp = row.family_map(spec.primary_family)
    if spec.primary_metric is Metric.PERCENT:
        return first_percent_ratio(mp, spec.metrics)
    value = mp.get(spec.primary_metric)
    return None if value is None else float(value)


def sort_rows(
    rows: Sequence["EntityRow"], spec: ColumnSpec, reverse: bool = False
) -> list["EntityRow"]:
    """
    Sort rows descending by key (ascending with reverse).

    Python's sort is stable in both directions, so rows with equal keys
    keep their input order.
    """

    def key(row: "EntityRow") -> float:
        value = sort_value(row, spec)
        return float("-inf") if value is None else value

    return sorted(rows, key=key, reverse=not reverse)
