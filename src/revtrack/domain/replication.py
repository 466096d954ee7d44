"""Fold replication job pages into the latest status per ``service:tag``."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from revtrack.domain.model import ReplicationStatus
from revtrack.domain.ports.fetching import ReplicationFeedError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from revtrack.domain.ports.fetching import ReplicationStatusFetcher

log = getLogger(__name__)

type LatestStatusMap = dict[str, ReplicationStatus]


def status_key(service_name: str, tag: str) -> str:
    return f"{service_name}:{tag}"


def key_for(record: ReplicationStatus) -> str | None:
    tag = record.latest_tag
    if tag is None:
        return None
    return status_key(record.service_name, tag)


@dataclass(slots=True)
class ReplicationStatusMerger:
    """Keep the record with the highest id for every key.

    Merging is monotonic: re-merging a page, or merging pages out of order,
    leaves the same map as merging only the newest record per key.
    """

    latest: LatestStatusMap = field(default_factory=dict[str, ReplicationStatus])

    def merge(self, page: Iterable[ReplicationStatus]) -> int:
        """Merge one page, returning the number of records that replaced or added a key."""

        accepted = 0
        for record in page:
            key = key_for(record)
            if key is None:
                log.debug("Replication job %s has no tags, skipping", record.id)
                continue
            current = self.latest.get(key)
            if current is not None and current.id >= record.id:
                continue
            self.latest[key] = record
            accepted += 1
        return accepted

    def status_for(self, service_name: str, tag: str) -> ReplicationStatus | None:
        return self.latest.get(status_key(service_name, tag))


def refresh_replication_statuses(
    fetcher: ReplicationStatusFetcher,
    *,
    policy_id: int,
    merger: ReplicationStatusMerger | None = None,
) -> ReplicationStatusMerger:
    """Fetch every page for ``policy_id`` and merge it.

    A feed that cannot be fetched or decoded counts as empty: the caller gets
    no status annotations instead of an error.
    """

    target = merger or ReplicationStatusMerger()
    try:
        pages = fetcher(policy_id=policy_id)
    except ReplicationFeedError as exc:
        log.warning("Replication feed unavailable for policy %s: %s", policy_id, exc)
        return target

    accepted = sum(target.merge(page) for page in pages)
    log.info(
        "Merged replication statuses for policy %s: pages=%s, accepted=%s, keys=%s",
        policy_id,
        len(pages),
        accepted,
        len(target.latest),
    )
    return target
