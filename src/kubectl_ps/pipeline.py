"""
The kubectl-ps run: fetch usage, collect rows, sort and render.

Usage is optional. When metrics-server cannot be reached, the usage and
percent columns are dropped with a warning and the table is still printed.
Listing failures propagate as FetchFailure.
"""

from __future__ import annotations

import datetime
import logging
from typing import Optional

from .columns import ColumnSpec
from .config import UNITS_HUMAN
from .entities import KINDS, ClusterSource, UsageSamples, summarize_usage
from .errors import CollaboratorUnavailable, UnknownScope
from .render import render_table
from .sorting import sort_rows

logger = logging.getLogger(__name__)


def fetch_usage(
    source: ClusterSource, spec: ColumnSpec
) -> tuple[ColumnSpec, Optional[UsageSamples]]:
    """Usage samples when the spec needs them, reducing the spec if unavailable."""
    if not spec.needs_usage:
        return spec, None
    try:
        return spec, summarize_usage(source.list_pod_metrics())
    except CollaboratorUnavailable as exc:
        logger.warning("%s; dropping usage and percent columns", exc)
        return spec.without_usage(), None


def run_table(
    scope: str,
    spec: ColumnSpec,
    source: ClusterSource,
    namespace: Optional[str] = None,
    all_namespaces: bool = False,
    reverse: bool = False,
    units: str = UNITS_HUMAN,
    now: Optional[datetime.datetime] = None,
) -> list[str]:
    """
    Build the table for one scope.

    Args:
        scope: pods, nodes or namespaces.
        spec: Parsed column layout.
        source: Cluster source (kubectl, or a fake in tests).
        namespace: Pod namespace when not listing all namespaces.
        all_namespaces: Pods only; list every namespace.
        reverse: Sort ascending instead of descending.
        units: Memory unit mode.
        now: Reference time for ages.

    Returns:
        Output lines, header first.
    """
    kind = KINDS.get(scope)
    if kind is None:
        raise UnknownScope(scope)
    spec, usage = fetch_usage(source, spec)
    pod_namespace = None if all_namespaces else namespace
    rows = kind.collect(source, spec, pod_namespace, usage)
    logger.debug("collected %d %s", len(rows), scope)
    rows = sort_rows(rows, spec, reverse=reverse)
    return render_table(rows, spec, kind, units, all_namespaces=all_namespaces, now=now)
