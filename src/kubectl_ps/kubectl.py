"""
Kubectl invocation and the cluster source used by kubectl-ps.

All cluster access goes through subprocess kubectl calls. Pods, nodes and
namespaces are fetched as JSON; pod usage is read from the metrics-server
API through `kubectl get --raw`.
"""

from __future__ import annotations

import json
import logging
import shlex
import subprocess
from typing import Any, Optional

from .config import DEFAULT_NAMESPACE, KUBECTL, KUBECTL_TIMEOUT, POD_METRICS_PATH
from .errors import CollaboratorUnavailable, FetchFailure

logger = logging.getLogger(__name__)


def run_kubectl(args: list[str], capture: bool = True) -> subprocess.CompletedProcess:
    """
    Run kubectl with the given args.

    Args:
        args: List of arguments (e.g. ["get", "pods", "-A", "-o", "json"]).
        capture: If True, capture stdout/stderr; otherwise inherit from process.

    Returns:
        CompletedProcess with returncode, stdout, stderr. Times out after
        KUBECTL_TIMEOUT seconds (raises subprocess.TimeoutExpired).
    """
    cmd = [KUBECTL] + args
    logger.debug("running %s", shlex.join(cmd))
    return subprocess.run(
        cmd,
        capture_output=capture,
        text=True,
        timeout=KUBECTL_TIMEOUT,
    )


def _load_json(args: list[str]) -> dict[str, Any]:
    """Run kubectl and decode stdout; raises FetchFailure on any failure."""
    command = shlex.join([KUBECTL] + args)
    try:
        result = run_kubectl(args)
    except subprocess.TimeoutExpired as exc:
        raise FetchFailure("kubectl command timed out", command) from exc
    except FileNotFoundError as exc:
        raise FetchFailure(f"{KUBECTL} not found on PATH", command) from exc
    if result.returncode != 0:
        error = (result.stderr or "").strip() or (result.stdout or "").strip()
        raise FetchFailure(error or "kubectl command failed", command)
    try:
        return json.loads(result.stdout or "{}")
    except json.JSONDecodeError as exc:
        raise FetchFailure(f"kubectl JSON decode error: {exc}", command) from exc


def kubectl_get_json(kind: str, namespace: Optional[str] = None, all_ns: bool = False) -> dict[str, Any]:
    """
    Get a list of resources as JSON.

    Args:
        kind: Resource kind (plural), e.g. "pods", "nodes".
        namespace: Namespace for namespaced kinds.
        all_ns: List across all namespaces (-A); wins over namespace.

    Returns:
        Parsed List-style JSON dict with "items".

    Raises:
        FetchFailure: kubectl failed, timed out or printed invalid JSON.
    """
    args = ["get", kind, "-o", "json"]
    if all_ns:
        args.append("-A")
    elif namespace:
        args.extend(["-n", namespace])
    return _load_json(args)


def current_namespace() -> str:
    """Namespace of the current kubeconfig context ("default" when unset)."""
    try:
        result = run_kubectl(
            ["config", "view", "--minify", "-o", "jsonpath={..namespace}"]
        )
    except (subprocess.TimeoutExpired, FileNotFoundError) as exc:
        raise FetchFailure(f"cannot read kubeconfig: {exc}") from exc
    if result.returncode != 0:
        raise FetchFailure((result.stderr or "").strip() or "cannot read kubeconfig")
    return (result.stdout or "").strip() or DEFAULT_NAMESPACE


class KubectlSource:
    """ClusterSource backed by the kubectl binary."""

    def list_pods(self, namespace: Optional[str]) -> list[dict[str, Any]]:
        """Pods of one namespace, or of all namespaces when namespace is None."""
        obj = kubectl_get_json("pods", namespace=namespace, all_ns=namespace is None)
        return obj.get("items") or []

    def list_nodes(self) -> list[dict[str, Any]]:
        return kubectl_get_json("nodes").get("items") or []

    def list_namespaces(self) -> list[dict[str, Any]]:
        return kubectl_get_json("namespaces").get("items") or []

    def list_pod_metrics(self) -> list[dict[str, Any]]:
        """
        PodMetrics items from metrics-server for all namespaces.

        Raises:
            CollaboratorUnavailable: The metrics API cannot be reached.
        """
        try:
            obj = _load_json(["get", "--raw", POD_METRICS_PATH])
        except FetchFailure as exc:
            raise CollaboratorUnavailable(f"metrics-server unavailable: {exc}") from exc
        return obj.get("items") or []
