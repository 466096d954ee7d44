"""Ports for fetching external replication status."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from revtrack.domain.model import ReplicationStatus


class ReplicationFeedError(RuntimeError):
    """Raised when the replication feed cannot be fetched or decoded."""


@runtime_checkable
class ReplicationStatusFetcher(Protocol):
    """Callable port returning every page of replication jobs for a policy."""

    def __call__(self, *, policy_id: int) -> Sequence[Sequence[ReplicationStatus]]: ...


__all__ = ["ReplicationFeedError", "ReplicationStatusFetcher"]
