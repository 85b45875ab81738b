"""
Table rendering: headers, rows and the optional TOTAL row.

Family columns follow the identity columns, primary family first, and age
comes last. Columns are padded to their widest cell with a two-space gap.
"""

from __future__ import annotations

import datetime
from typing import Optional, Sequence

from .columns import ColumnSpec, Family, Metric
from .config import COLUMN_GAP, PERCENT_LABEL, PLACEHOLDER, TOTAL_ROW_LABEL
from .entities import EntityKind, EntityRow
from .metrics import MetricMap, accumulate_totals, percent_operands, percent_ratio
from .units import format_age, format_memory, format_percent


def metric_headers(spec: ColumnSpec) -> list[str]:
    """Header labels of the family columns, e.g. MEM_USE, MEM_USE_REQ."""
    headers = []
    for family in spec.families:
        for i, metric in enumerate(spec.metrics):
            if metric is Metric.PERCENT:
                operands = percent_operands(spec.metrics, i)
                if operands is None:
                    label = PERCENT_LABEL
                else:
                    label = f"{operands[0].label}_{operands[1].label}"
            else:
                label = metric.label
            headers.append(family.prefix + label)
    return headers


def format_cell(family: Family, value: Optional[int], units: str) -> str:
    if value is None:
        return PLACEHOLDER
    if family is Family.MEMORY:
        return format_memory(value, units)
    return str(value)


def metric_cells(
    mem: MetricMap, cpu: MetricMap, spec: ColumnSpec, units: str
) -> list[str]:
    cells = []
    for family in spec.families:
        mp = mem if family is Family.MEMORY else cpu
        for i, metric in enumerate(spec.metrics):
            if metric is Metric.PERCENT:
                ratio = percent_ratio(mp, percent_operands(spec.metrics, i))
                cells.append(format_percent(ratio))
            else:
                cells.append(format_cell(family, mp.get(metric), units))
    return cells


def align(table: Sequence[Sequence[str]], gap: int = COLUMN_GAP) -> list[str]:
    """Pad every column but the last to its widest cell plus gap."""
    if not table:
        return []
    ncols = max(len(r) for r in table)
    widths = [0] * ncols
    for r in table:
        for i, cell in enumerate(r):
            widths[i] = max(widths[i], len(cell))
    lines = []
    for r in table:
        padded = [
            cell if i == len(r) - 1 else cell.ljust(widths[i] + gap)
            for i, cell in enumerate(r)
        ]
        lines.append("".join(padded).rstrip())
    return lines


def render_table(
    rows: Sequence[EntityRow],
    spec: ColumnSpec,
    kind: EntityKind,
    units: str,
    all_namespaces: bool = False,
    now: Optional[datetime.datetime] = None,
) -> list[str]:
    """
    Render rows (already sorted) as aligned text lines.

    Args:
        rows: Entity rows in display order.
        spec: Parsed column layout.
        kind: Entity kind supplying the identity columns.
        units: Memory unit mode (see config.ALL_UNITS).
        all_namespaces: Pods only; adds the NAMESPACE column.
        now: Reference time for the AGE column (defaults to current time).

    Returns:
        Header line, one line per row and the TOTAL line when spec.total.
    """
    header = kind.identity_headers(spec, all_namespaces) + metric_headers(spec) + ["AGE"]
    table = [header]
    for row in rows:
        table.append(
            kind.identity(row, spec, all_namespaces)
            + metric_cells(row.mem, row.cpu, spec, units)
            + [format_age(row.created, now)]
        )

    if spec.total:
        totals = accumulate_totals(((r.mem, r.cpu) for r in rows), spec)
        n_identity = len(kind.identity_headers(spec, all_namespaces))
        table.append(
            [TOTAL_ROW_LABEL]
            + [PLACEHOLDER] * (n_identity - 1)
            + metric_cells(totals[Family.MEMORY], totals[Family.CPU], spec, units)
            + [PLACEHOLDER]
        )

    return align(table)
