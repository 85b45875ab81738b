"""Tests for header labels, cells, alignment and the TOTAL row."""

import datetime

import pytest

from kubectl_ps.columns import Metric, parse_column_spec
from kubectl_ps.entities import KINDS, EntityRow
from kubectl_ps.metrics import MetricMap
from kubectl_ps.render import align, metric_cells, metric_headers, render_table

NOW = datetime.datetime(2024, 6, 1, 12, 0, 0, tzinfo=datetime.timezone.utc)
MIB = 1024 * 1024


def make_row(spec, name, mem=None, cpu=None, **kw):
    row = EntityRow(
        name=name,
        status=kw.pop("status", "Running"),
        created=kw.pop("created", NOW - datetime.timedelta(hours=3)),
        mem=MetricMap.for_spec(spec),
        cpu=MetricMap.for_spec(spec),
        **kw,
    )
    for metric, value in (mem or {}).items():
        row.mem.add(Metric(metric), value)
    for metric, value in (cpu or {}).items():
        row.cpu.add(Metric(metric), value)
    return row


def test_headers_primary_family_first():
    spec = parse_column_spec("cmur", "pods")
    assert metric_headers(spec) == ["CPU_USE", "CPU_REQ", "MEM_USE", "MEM_REQ"]


def test_percent_header_from_preceding_columns():
    spec = parse_column_spec("murp", "pods")
    assert metric_headers(spec) == ["MEM_USE", "MEM_REQ", "MEM_USE_REQ"]


def test_percent_header_fallback_and_pct():
    assert metric_headers(parse_column_spec("mprl", "pods")) == ["MEM_REQ_LIM", "MEM_REQ", "MEM_LIM"]
    assert metric_headers(parse_column_spec("mrp", "pods")) == ["MEM_REQ", "MEM_PCT"]


def test_node_headers():
    spec = parse_column_spec("mulft", "nodes")
    assert metric_headers(spec) == ["MEM_USE", "MEM_LIM", "MEM_FREE", "MEM_TOTAL"]


def test_cells_memory_cpu_and_placeholder():
    spec = parse_column_spec("mcurp", "pods")
    row = make_row(spec, "a", mem={"u": 200 * MIB, "r": 100 * MIB}, cpu={"r": 250})
    assert metric_cells(row.mem, row.cpu, spec, "human") == [
        "200.0M", "100.0M", "200%", "-", "250", "-",
    ]


def test_cells_percent_fallback_first_two():
    spec = parse_column_spec("mprl", "pods")
    row = make_row(spec, "a", mem={"r": 50, "l": 200})
    assert metric_cells(row.mem, row.cpu, spec, "bytes") == ["25%", "50", "200"]


def test_zero_is_not_placeholder():
    spec = parse_column_spec("cr", "pods")
    row = make_row(spec, "a", cpu={"r": 0})
    assert metric_cells(row.mem, row.cpu, spec, "human") == ["0"]


def test_align_two_space_gap():
    lines = align([["NAME", "AGE"], ["a-long-name", "1d"]])
    assert lines == ["NAME         AGE", "a-long-name  1d"]


def test_render_pods_all_namespaces_with_node():
    spec = parse_column_spec("mrn", "pods")
    rows = [make_row(spec, "web", {"r": 512 * MIB}, namespace="app", node="node-1")]
    lines = render_table(rows, spec, KINDS["pods"], "human", all_namespaces=True, now=NOW)
    assert lines[0].split() == ["NAMESPACE", "NAME", "STATUS", "NODE", "MEM_REQ", "AGE"]
    assert lines[1].split() == ["app", "web", "Running", "node-1", "512.0M", "3h"]
    assert len(lines) == 2


def test_render_total_row():
    spec = parse_column_spec("mr", "pods", total=True)
    rows = [
        make_row(spec, "big", {"r": 512 * MIB}),
        make_row(spec, "none"),
        make_row(spec, "small", {"r": 256 * MIB}),
    ]
    lines = render_table(rows, spec, KINDS["pods"], "mebibytes", now=NOW)
    assert lines[2].split() == ["none", "Running", "-", "3h"]
    assert lines[-1].split() == ["TOTAL", "-", "768.0", "-"]


def test_render_total_row_all_namespaces_and_node():
    spec = parse_column_spec("crn", "pods", total=True)
    rows = [make_row(spec, "a", cpu={"r": 100}), make_row(spec, "b", cpu={"r": 50})]
    lines = render_table(rows, spec, KINDS["pods"], "human", all_namespaces=True, now=NOW)
    assert lines[-1].split() == ["TOTAL", "-", "-", "-", "150", "-"]


def test_render_nodes_identity():
    spec = parse_column_spec("cl", "nodes")
    rows = [make_row(spec, "node-1", cpu={"l": 4000}, status="Ready", created=None)]
    lines = render_table(rows, spec, KINDS["nodes"], "human", now=NOW)
    assert lines == ["NAME    STATUS  CPU_LIM  AGE", "node-1  Ready   4000     -"]
