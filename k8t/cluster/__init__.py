"""Cluster-query layer for k8t.

Submodules
----------
client     -- ClusterClient: kubernetes-asyncio wrapper (pods, events, namespaces).
validation -- Namespace / pod / workload name validation (RFC 1123 + denylist).
redaction  -- Secret redaction applied to event messages before analysis.
"""
