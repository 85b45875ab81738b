"""
Column grammar: families, metric kinds and the parsed column layout.

A grammar string such as "mcurp" is walked once, left to right, and turned
into an immutable ColumnSpec. The same pass records the first family and
the first metric letter, which become the sort key.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Optional

from .config import FAMILY_PREFIXES, NODES, PODS, SHORT_LABELS, SHOW_NODE_LETTER
from .errors import InvalidFlag, MissingFamily, MissingMetric, UnknownFlag


class Family(enum.Enum):
    MEMORY = "m"
    CPU = "c"

    @property
    def prefix(self) -> str:
        return FAMILY_PREFIXES[self.value]

    @property
    def other(self) -> "Family":
        return Family.CPU if self is Family.MEMORY else Family.MEMORY


class Metric(enum.Enum):
    REQUEST = "r"
    LIMIT = "l"
    USAGE = "u"
    PERCENT = "p"
    FREE = "f"
    TOTAL = "t"

    @property
    def node_only(self) -> bool:
        return self in (Metric.FREE, Metric.TOTAL)

    @property
    def label(self) -> str:
        return SHORT_LABELS[self.value]


# Inputs a derived node column is computed from.
_DERIVED_FROM = {
    Metric.FREE: (Metric.LIMIT, Metric.USAGE),
    Metric.TOTAL: (Metric.LIMIT,),
}

_METRIC_LETTERS = {m.value: m for m in Metric}


@dataclass(frozen=True)
class ColumnSpec:
    mem: bool
    cpu: bool
    metrics: tuple[Metric, ...]
    show_node: bool = False
    total: bool = False
    primary_family: Family = Family.MEMORY
    primary_metric: Metric = Metric.REQUEST

    @property
    def families(self) -> list[Family]:
        """Enabled families in display order (primary family first)."""
        ordered = [self.primary_family, self.primary_family.other]
        return [f for f in ordered if self.has_family(f)]

    def has_family(self, family: Family) -> bool:
        return self.mem if family is Family.MEMORY else self.cpu

    def has_metric(self, metric: Metric) -> bool:
        return metric in self.metrics

    @property
    def stored_metrics(self) -> tuple[Metric, ...]:
        """Metrics held in a MetricMap: every shown non-percent metric plus
        the inputs of the derived ones, first occurrence order."""
        seen: list[Metric] = []
        for metric in self.metrics:
            if metric is Metric.PERCENT:
                continue
            for needed in (metric, *_DERIVED_FROM.get(metric, ())):
                if needed not in seen:
                    seen.append(needed)
        return tuple(seen)

    @property
    def needs_usage(self) -> bool:
        return self.has_metric(Metric.USAGE) or self.has_metric(Metric.FREE)

    def with_total(self, total: bool = True) -> "ColumnSpec":
        return replace(self, total=total)

    def without_usage(self) -> "ColumnSpec":
        """Drop usage and percent columns (no usage source available)."""
        kept = tuple(
            m for m in self.metrics if m not in (Metric.USAGE, Metric.PERCENT)
        )
        return replace(self, metrics=kept)


def parse_column_spec(flags: str, scope: str, total: bool = False) -> ColumnSpec:
    """
    Parse a grammar string into a ColumnSpec.

    Args:
        flags: Letters from "mc" (families), "rlupft" (metrics) and "n".
        scope: One of pods, nodes, namespaces.
        total: Whether a TOTAL row is requested.

    Raises:
        UnknownFlag: A character outside the grammar.
        InvalidFlag: "n" outside pods scope or "f"/"t" outside nodes scope.
        MissingFamily: Neither "m" nor "c" present.
        MissingMetric: No metric letter present.
    """
    mem = cpu = show_node = False
    metrics: list[Metric] = []
    primary_family: Optional[Family] = None

    for ch in flags:
        if ch == Family.MEMORY.value:
            mem = True
        elif ch == Family.CPU.value:
            cpu = True
        elif ch == SHOW_NODE_LETTER:
            if scope != PODS:
                raise InvalidFlag(ch, scope)
            show_node = True
            continue
        elif ch in _METRIC_LETTERS:
            metric = _METRIC_LETTERS[ch]
            if metric.node_only and scope != NODES:
                raise InvalidFlag(ch, scope)
            metrics.append(metric)
            continue
        else:
            raise UnknownFlag(ch)
        if primary_family is None:
            primary_family = Family(ch)

    if not mem and not cpu:
        raise MissingFamily()
    if not metrics:
        raise MissingMetric()

    return ColumnSpec(
        mem=mem,
        cpu=cpu,
        metrics=tuple(metrics),
        show_node=show_node,
        total=total,
        primary_family=primary_family or Family.MEMORY,
        primary_metric=metrics[0],
    )
