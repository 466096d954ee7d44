"""Public domain model surface."""

from __future__ import annotations

from revtrack.domain.model.enums import DeployState, Environment, PendingReason
from revtrack.domain.model.replication import FINISHED_STATUS, ReplicationStatus
from revtrack.domain.model.revision import ServiceRevision, ServiceTag

__all__ = [
    "FINISHED_STATUS",
    "DeployState",
    "Environment",
    "PendingReason",
    "ReplicationStatus",
    "ServiceRevision",
    "ServiceTag",
]
