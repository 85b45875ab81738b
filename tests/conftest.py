"""Shared fixtures: Kubernetes JSON objects and a fake cluster source."""

from __future__ import annotations

import datetime

import pytest

from kubectl_ps.errors import CollaboratorUnavailable

NOW = datetime.datetime(2024, 6, 1, 12, 0, 0, tzinfo=datetime.timezone.utc)


def make_pod(name, namespace="default", node="node-1", containers=(), phase="Running",
             created="2024-05-30T12:00:00Z"):
    """Pod JSON; containers is a list of (requests, limits) dicts."""
    return {
        "metadata": {"name": name, "namespace": namespace, "creationTimestamp": created},
        "spec": {
            "nodeName": node,
            "containers": [
                {"name": f"c{i}", "resources": {"requests": req, "limits": lim}}
                for i, (req, lim) in enumerate(containers)
            ],
        },
        "status": {"phase": phase},
    }


def make_node(name, memory="8Gi", cpu="4", ready=True, created="2024-05-01T12:00:00Z"):
    return {
        "metadata": {"name": name, "creationTimestamp": created},
        "status": {
            "allocatable": {"memory": memory, "cpu": cpu},
            "conditions": [{"type": "Ready", "status": "True" if ready else "False"}],
        },
    }


def make_namespace(name, phase="Active", created="2024-05-01T12:00:00Z"):
    return {
        "metadata": {"name": name, "creationTimestamp": created},
        "status": {"phase": phase},
    }


def make_pod_metrics(name, namespace="default", memory="100Mi", cpu="50m"):
    return {
        "metadata": {"name": name, "namespace": namespace},
        "containers": [{"name": "c0", "usage": {"memory": memory, "cpu": cpu}}],
    }


class FakeSource:
    """In-memory ClusterSource."""

    def __init__(self, pods=(), nodes=(), namespaces=(), pod_metrics=None):
        self.pods = list(pods)
        self.nodes = list(nodes)
        self.namespaces = list(namespaces)
        self.pod_metrics = pod_metrics
        self.pod_calls = []

    def list_pods(self, namespace):
        self.pod_calls.append(namespace)
        if namespace is None:
            return list(self.pods)
        return [p for p in self.pods if p["metadata"]["namespace"] == namespace]

    def list_nodes(self):
        return list(self.nodes)

    def list_namespaces(self):
        return list(self.namespaces)

    def list_pod_metrics(self):
        if self.pod_metrics is None:
            raise CollaboratorUnavailable("metrics-server unavailable: not installed")
        return list(self.pod_metrics)


@pytest.fixture
def now():
    return NOW
