"""Translate Harbor payloads into domain value objects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from revtrack.domain.model import ReplicationStatus

if TYPE_CHECKING:
    from .schema import ReplicationJobPayload


def parse_replication_status(payload: ReplicationJobPayload) -> ReplicationStatus:
    return ReplicationStatus(
        id=payload.id,
        status=payload.status,
        repository=payload.repository,
        tags=tuple(payload.tags),
        policy_id=payload.policy_id,
        operation=payload.operation,
        creation_time=payload.creation_time,
        update_time=payload.update_time,
    )
