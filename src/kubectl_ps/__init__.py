"""
kubectl_ps: ps-style memory and CPU tables for pods, nodes and namespaces.

A terse letter grammar (e.g. "mcurp") selects the resource families and
metric columns; rows are sorted by the first family and metric named in
the grammar, with an optional TOTAL row.
"""

__version__ = "0.1.0"
