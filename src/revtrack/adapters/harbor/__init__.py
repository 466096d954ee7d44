"""Public interface for the Harbor adapter."""

from __future__ import annotations

from .client import HarborReplicationFetcher
from .schema import ReplicationJobPage, ReplicationJobPayload
from .translator import parse_replication_status

__all__ = [
    "HarborReplicationFetcher",
    "ReplicationJobPage",
    "ReplicationJobPayload",
    "parse_replication_status",
]
