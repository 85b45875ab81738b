"""
Per-entity metric storage and the arithmetic shared by every scope.

A MetricMap holds one family's values (bytes for memory, millicores for
CPU) keyed by Metric. None means "no data" and is kept apart from zero:
it never takes part in sums and renders as a placeholder.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from .columns import ColumnSpec, Family, Metric


def add_quantity(a: Optional[int], b: Optional[int]) -> Optional[int]:
    """Add two cells; an unavailable side contributes nothing."""
    if a is None:
        return b
    if b is None:
        return a
    return a + b


class MetricMap:
    """Values of one family for one entity, restricted to a fixed domain."""

    __slots__ = ("_values",)

    def __init__(self, metrics: Iterable[Metric]) -> None:
        self._values: dict[Metric, Optional[int]] = {m: None for m in metrics}

    @classmethod
    def for_spec(cls, spec: ColumnSpec) -> "MetricMap":
        return cls(spec.stored_metrics)

    def __contains__(self, metric: Metric) -> bool:
        return metric in self._values

    def __iter__(self) -> Iterator[Metric]:
        return iter(self._values)

    def __repr__(self) -> str:
        cells = ", ".join(f"{m.value}={v}" for m, v in self._values.items())
        return f"MetricMap({cells})"

    def get(self, metric: Metric) -> Optional[int]:
        return self._values.get(metric)

    def set(self, metric: Metric, value: Optional[int]) -> None:
        if metric in self._values:
            self._values[metric] = value

    def add(self, metric: Metric, value: Optional[int]) -> None:
        if metric in self._values:
            self._values[metric] = add_quantity(self._values[metric], value)

    def accumulate(self, other: "MetricMap") -> None:
        """Add every cell of other into this map (used for the TOTAL row)."""
        for metric in self._values:
            self.add(metric, other.get(metric))


def percent_operands(
    metrics: tuple[Metric, ...], index: int
) -> Optional[tuple[Metric, Metric]]:
    """
    Pick the two columns a percent entry at metrics[index] is computed from.

    Only metrics that are neither percent nor node-only qualify. The last
    two qualifying metrics before the entry are used; when fewer than two
    precede it, the first two of the whole list. None when fewer than two
    exist at all.
    """
    qualifying = [m for m in metrics if m is not Metric.PERCENT and not m.node_only]
    preceding = [
        m
        for m in metrics[:index]
        if m is not Metric.PERCENT and not m.node_only
    ]
    if len(preceding) >= 2:
        return preceding[-2], preceding[-1]
    if len(qualifying) >= 2:
        return qualifying[0], qualifying[1]
    return None


def percent_ratio(mp: MetricMap, operands: Optional[tuple[Metric, Metric]]) -> Optional[float]:
    """earlier / later for the operand pair; None unless both are positive."""
    if operands is None:
        return None
    earlier, later = (mp.get(m) for m in operands)
    if earlier is None or later is None or earlier <= 0 or later <= 0:
        return None
    return earlier / later


def first_percent_ratio(mp: MetricMap, metrics: tuple[Metric, ...]) -> Optional[float]:
    """Ratio for the first percent entry of metrics (the sort key)."""
    if Metric.PERCENT not in metrics:
        return None
    return percent_ratio(mp, percent_operands(metrics, metrics.index(Metric.PERCENT)))


def accumulate_totals(
    pairs: Iterable[tuple[MetricMap, MetricMap]], spec: ColumnSpec
) -> dict[Family, MetricMap]:
    """Fresh TOTAL maps for both families, summed over every row."""
    totals = {Family.MEMORY: MetricMap.for_spec(spec), Family.CPU: MetricMap.for_spec(spec)}
    for mem, cpu in pairs:
        totals[Family.MEMORY].accumulate(mem)
        totals[Family.CPU].accumulate(cpu)
    return totals
