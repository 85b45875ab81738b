"""
Entity kinds: build one row per pod, node or namespace.

Each kind supplies only its identity columns and how containers and usage
samples contribute to its rows. Aggregation, sorting and rendering are
shared by all kinds.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from .columns import ColumnSpec, Family, Metric
from .config import NAMESPACES, NODES, PODS
from .metrics import MetricMap
from .quantity import cpu_millicores, memory_bytes
from .units import parse_timestamp

logger = logging.getLogger(__name__)

# (namespace, pod name) -> (memory bytes, cpu millicores)
UsageSamples = dict[tuple[str, str], tuple[int, int]]


class ClusterSource(Protocol):
    def list_pods(self, namespace: Optional[str]) -> list[dict[str, Any]]: ...

    def list_nodes(self) -> list[dict[str, Any]]: ...

    def list_namespaces(self) -> list[dict[str, Any]]: ...

    def list_pod_metrics(self) -> list[dict[str, Any]]: ...


@dataclass
class EntityRow:
    name: str
    status: str
    created: Optional[datetime.datetime]
    mem: MetricMap
    cpu: MetricMap
    namespace: str = ""
    node: str = ""

    def family_map(self, family: Family) -> MetricMap:
        return self.mem if family is Family.MEMORY else self.cpu


@dataclass
class _Accumulator:
    """Rows of one run, indexed for container and usage contributions."""

    rows: list[EntityRow] = field(default_factory=list)
    index: dict[str, EntityRow] = field(default_factory=dict)


def _meta(obj: dict[str, Any]) -> dict[str, Any]:
    return obj.get("metadata") or {}


def _new_row(obj: dict[str, Any], spec: ColumnSpec, status: str) -> EntityRow:
    meta = _meta(obj)
    return EntityRow(
        name=meta.get("name", ""),
        namespace=meta.get("namespace") or "",
        status=status,
        created=parse_timestamp(meta.get("creationTimestamp")),
        mem=MetricMap.for_spec(spec),
        cpu=MetricMap.for_spec(spec),
    )


def _add_resource_list(row: EntityRow, metric: Metric, resources: dict[str, Any]) -> None:
    """Add the memory/cpu entries of a requests/limits/allocatable block."""
    if "memory" in resources:
        try:
            row.mem.add(metric, memory_bytes(resources["memory"]))
        except ValueError as exc:
            logger.warning("%s: ignoring memory %s: %s", row.name, metric.name.lower(), exc)
    if "cpu" in resources:
        try:
            row.cpu.add(metric, cpu_millicores(resources["cpu"]))
        except ValueError as exc:
            logger.warning("%s: ignoring cpu %s: %s", row.name, metric.name.lower(), exc)


def add_containers(row: EntityRow, pod: dict[str, Any], limits: bool = True) -> None:
    """Add the requests (and limits) of every container of pod into row."""
    for container in (pod.get("spec") or {}).get("containers") or []:
        resources = container.get("resources") or {}
        _add_resource_list(row, Metric.REQUEST, resources.get("requests") or {})
        if limits:
            _add_resource_list(row, Metric.LIMIT, resources.get("limits") or {})


def summarize_usage(items: list[dict[str, Any]]) -> UsageSamples:
    """Sum container usage of each PodMetrics item."""
    samples: UsageSamples = {}
    for item in items:
        meta = _meta(item)
        mem = cpu = 0
        for container in item.get("containers") or []:
            usage = container.get("usage") or {}
            try:
                mem += memory_bytes(usage.get("memory", "0"))
                cpu += cpu_millicores(usage.get("cpu", "0"))
            except ValueError as exc:
                logger.warning("%s: ignoring usage sample: %s", meta.get("name", "?"), exc)
        samples[(meta.get("namespace") or "", meta.get("name", ""))] = (mem, cpu)
    return samples


def add_usage(row: EntityRow, sample: tuple[int, int]) -> None:
    mem, cpu = sample
    row.mem.add(Metric.USAGE, mem)
    row.cpu.add(Metric.USAGE, cpu)


def derive_node_columns(row: EntityRow) -> None:
    """free = limit - usage when both are known; total = limit."""
    for mp in (row.mem, row.cpu):
        limit, usage = mp.get(Metric.LIMIT), mp.get(Metric.USAGE)
        if limit is not None and usage is not None:
            mp.set(Metric.FREE, limit - usage)
        mp.set(Metric.TOTAL, limit)


class EntityKind:
    """One table scope: its identity columns and how its rows are built."""

    scope = ""

    def identity_headers(self, spec: ColumnSpec, all_namespaces: bool) -> list[str]:
        return ["NAME", "STATUS"]

    def identity(self, row: EntityRow, spec: ColumnSpec, all_namespaces: bool) -> list[str]:
        return [row.name, row.status]

    def collect(
        self,
        source: ClusterSource,
        spec: ColumnSpec,
        namespace: Optional[str],
        usage: Optional[UsageSamples],
    ) -> list[EntityRow]:
        raise NotImplementedError


class PodKind(EntityKind):
    scope = PODS

    def identity_headers(self, spec: ColumnSpec, all_namespaces: bool) -> list[str]:
        headers = ["NAMESPACE"] if all_namespaces else []
        headers += ["NAME", "STATUS"]
        if spec.show_node:
            headers.append("NODE")
        return headers

    def identity(self, row: EntityRow, spec: ColumnSpec, all_namespaces: bool) -> list[str]:
        cells = [row.namespace] if all_namespaces else []
        cells += [row.name, row.status]
        if spec.show_node:
            cells.append(row.node)
        return cells

    def collect(self, source, spec, namespace, usage):
        rows = []
        for pod in source.list_pods(namespace):
            row = _new_row(pod, spec, (pod.get("status") or {}).get("phase", ""))
            row.node = (pod.get("spec") or {}).get("nodeName") or ""
            add_containers(row, pod)
            if usage and (row.namespace, row.name) in usage:
                add_usage(row, usage[(row.namespace, row.name)])
            rows.append(row)
        return rows


def node_status(node: dict[str, Any]) -> str:
    for cond in (node.get("status") or {}).get("conditions") or []:
        if cond.get("type") == "Ready" and cond.get("status") == "True":
            return "Ready"
    return "NotReady"


class NodeKind(EntityKind):
    scope = NODES

    def collect(self, source, spec, namespace, usage):
        acc = _Accumulator()
        for node in source.list_nodes():
            row = _new_row(node, spec, node_status(node))
            _add_resource_list(
                row, Metric.LIMIT, (node.get("status") or {}).get("allocatable") or {}
            )
            acc.rows.append(row)
            acc.index[row.name] = row

        # Pod limits are not summed per node: the limit column is capacity.
        pod_node: dict[tuple[str, str], str] = {}
        for pod in source.list_pods(None):
            node_name = (pod.get("spec") or {}).get("nodeName") or ""
            row = acc.index.get(node_name)
            if row is None:
                continue
            meta = _meta(pod)
            pod_node[(meta.get("namespace") or "", meta.get("name", ""))] = node_name
            add_containers(row, pod, limits=False)

        for key, sample in (usage or {}).items():
            row = acc.index.get(pod_node.get(key, ""))
            if row is not None:
                add_usage(row, sample)

        for row in acc.rows:
            derive_node_columns(row)
        return acc.rows


class NamespaceKind(EntityKind):
    scope = NAMESPACES

    def collect(self, source, spec, namespace, usage):
        acc = _Accumulator()
        for ns in source.list_namespaces():
            row = _new_row(ns, spec, (ns.get("status") or {}).get("phase", ""))
            acc.rows.append(row)
            acc.index[row.name] = row

        for pod in source.list_pods(None):
            row = acc.index.get(_meta(pod).get("namespace") or "")
            if row is not None:
                add_containers(row, pod)

        for (pod_ns, _), sample in (usage or {}).items():
            row = acc.index.get(pod_ns)
            if row is not None:
                add_usage(row, sample)
        return acc.rows


KINDS: dict[str, EntityKind] = {
    PODS: PodKind(),
    NODES: NodeKind(),
    NAMESPACES: NamespaceKind(),
}
