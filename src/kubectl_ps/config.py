"""
Constants for kubectl-ps.

Defines the scopes (and CLI aliases), the letters of the column grammar,
header labels, unit modes and the kubectl/metrics-server settings.
"""

# Entity scopes a table can be about.
PODS = "pods"
NODES = "nodes"
NAMESPACES = "namespaces"

ALL_SCOPES = [PODS, NODES, NAMESPACES]

# CLI accepts singular, plural and short names; map to the scope name.
SCOPE_ALIASES = {
    "pod": PODS,
    "pods": PODS,
    "po": PODS,
    "p": PODS,
    "node": NODES,
    "nodes": NODES,
    "no": NODES,
    "n": NODES,
    "ns": NAMESPACES,
    "namespace": NAMESPACES,
    "namespaces": NAMESPACES,
}

# Grammar letters that are not metric kinds.
FAMILY_LETTERS = frozenset("mc")
SHOW_NODE_LETTER = "n"

# Header prefix per family letter.
FAMILY_PREFIXES = {"m": "MEM_", "c": "CPU_"}

# Header label per metric letter; percent labels are derived.
SHORT_LABELS = {
    "r": "REQ",
    "l": "LIM",
    "u": "USE",
    "f": "FREE",
    "t": "TOTAL",
}
PERCENT_LABEL = "PCT"

# Rendered for unavailable cells and non-numeric TOTAL row cells.
PLACEHOLDER = "-"
TOTAL_ROW_LABEL = "TOTAL"

# Minimum gap between table columns.
COLUMN_GAP = 2

# Memory unit modes (-h, -m, -g, -b).
UNITS_HUMAN = "human"
UNITS_MEBIBYTES = "mebibytes"
UNITS_GIBIBYTES = "gibibytes"
UNITS_BYTES = "bytes"
ALL_UNITS = [UNITS_HUMAN, UNITS_MEBIBYTES, UNITS_GIBIBYTES, UNITS_BYTES]

MIB = 1024 * 1024
GIB = 1024 * MIB

# kubectl invocation.
KUBECTL = "kubectl"
KUBECTL_TIMEOUT = 60  # seconds
DEFAULT_NAMESPACE = "default"

# metrics-server pod usage, read through the API server.
POD_METRICS_PATH = "/apis/metrics.k8s.io/v1beta1/pods"
