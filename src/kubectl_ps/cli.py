"""
CLI entry point for kubectl-ps.

Parses the scope, the column grammar and options, then delegates to
run_table(). Installed as `kubectl-ps`, so it also runs as `kubectl ps`.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from .columns import parse_column_spec
from .config import (
    PODS,
    SCOPE_ALIASES,
    UNITS_BYTES,
    UNITS_GIBIBYTES,
    UNITS_HUMAN,
    UNITS_MEBIBYTES,
)
from .errors import FetchFailure, UsageError
from .kubectl import KubectlSource, current_namespace
from .pipeline import run_table

# Shown at the bottom of kubectl-ps --help
EPILOG = """
\b
Scopes:
    pods | nodes | namespaces   (also pod, po, p, node, no, n, ns, namespace)

\b
Metric flags:
    m  memory      u  usage
    c  cpu         r  requests
    p  percent     l  limits
                   n  node  (pods only)
                   f  free  (nodes only)
                   t  total (nodes only)

\b
Examples:
    kubectl ps pods mur            # memory usage and requests, sorted by usage
    kubectl ps pods mcurp -A       # memory and cpu usage/request/percent, all namespaces
    kubectl ps pods mrn -n app -t  # memory requests with node column and TOTAL row
    kubectl ps nodes mulft -g      # node memory in GiB, incl. free and total
    kubectl ps ns cr -r            # namespaces by cpu requests, ascending
"""


def _units(mebi: bool, gibi: bool, raw_bytes: bool) -> str:
    if raw_bytes:
        return UNITS_BYTES
    if gibi:
        return UNITS_GIBIBYTES
    if mebi:
        return UNITS_MEBIBYTES
    return UNITS_HUMAN


@click.command(
    context_settings={"help_option_names": ["--help"]},
    epilog=EPILOG,
)
@click.option(
    "-A",
    "--all-namespaces",
    "all_namespaces",
    is_flag=True,
    help="All namespaces / all nodes",
)
@click.option(
    "-n",
    "--namespace",
    "namespace",
    metavar="NS",
    help="Select namespace NS (pods)",
)
@click.option("-r", "--reverse", is_flag=True, help="Reverse sort (ascending)")
@click.option("-h", "human", is_flag=True, help="Human-readable units (default)")
@click.option("-m", "mebi", is_flag=True, help="Memory in mebibytes")
@click.option("-g", "gibi", is_flag=True, help="Memory in gibibytes")
@click.option("-b", "raw_bytes", is_flag=True, help="Memory in bytes")
@click.option("-t", "--total", is_flag=True, help="Show a TOTAL row")
@click.argument(
    "scope",
    type=click.Choice(list(SCOPE_ALIASES), case_sensitive=False),
)
@click.argument("flags")
@click.pass_context
def main(
    ctx: click.Context,
    all_namespaces: bool,
    namespace: Optional[str],
    reverse: bool,
    human: bool,
    mebi: bool,
    gibi: bool,
    raw_bytes: bool,
    total: bool,
    scope: str,
    flags: str,
) -> int:
    """
    Print ps-style memory/CPU tables for pods, nodes or namespaces.

    FLAGS selects the columns: m and/or c pick the families, the metric
    letters pick the columns in order. Rows are sorted by the first family
    and metric letter given, largest first.
    """
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    scope_name = SCOPE_ALIASES[scope.lower()]
    try:
        spec = parse_column_spec(flags, scope_name, total=total)
    except UsageError as exc:
        raise click.UsageError(str(exc), ctx=ctx) from exc

    try:
        if scope_name == PODS and not all_namespaces and not namespace:
            namespace = current_namespace()
        lines = run_table(
            scope_name,
            spec,
            KubectlSource(),
            namespace=namespace,
            all_namespaces=all_namespaces,
            reverse=reverse,
            units=_units(mebi, gibi, raw_bytes),
        )
    except FetchFailure as exc:
        raise click.ClickException(str(exc)) from exc

    for line in lines:
        click.echo(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
