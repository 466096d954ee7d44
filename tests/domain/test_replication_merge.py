from __future__ import annotations

from collections.abc import Sequence

from revtrack.domain.model import ReplicationStatus
from revtrack.domain.ports.fetching import ReplicationFeedError
from revtrack.domain.replication import (
    ReplicationStatusMerger,
    key_for,
    refresh_replication_statuses,
)


def _status(
    job_id: int, status: str, repository: str = "library/svcA", *tags: str
) -> ReplicationStatus:
    return ReplicationStatus(
        id=job_id,
        status=status,
        repository=repository,
        tags=tags or ("v1",),
    )


def test_key_uses_repository_after_first_slash_and_last_tag() -> None:
    record = _status(1, "finished", "library/team/svcA", "v1", "v2")

    assert record.service_name == "team/svcA"
    assert key_for(record) == "team/svcA:v2"


def test_key_for_repository_without_slash() -> None:
    assert key_for(_status(1, "finished", "svcA")) == "svcA:v1"


def test_merge_keeps_highest_id_per_key() -> None:
    merger = ReplicationStatusMerger()

    accepted = merger.merge([_status(5, "running"), _status(9, "finished"), _status(7, "failed")])

    assert accepted == 2
    status = merger.status_for("svcA", "v1")
    assert status is not None
    assert (status.id, status.status) == (9, "finished")


def test_merge_is_order_independent_and_idempotent() -> None:
    page_one = [_status(3, "pending"), _status(4, "running", "library/svcB")]
    page_two = [_status(8, "finished"), _status(2, "failed", "library/svcB")]

    forward = ReplicationStatusMerger()
    forward.merge(page_one)
    forward.merge(page_two)

    backward = ReplicationStatusMerger()
    backward.merge(page_two)
    backward.merge(page_one)
    again = backward.merge(page_one + page_two)

    assert forward.latest == backward.latest
    assert again == 0
    assert {key: record.id for key, record in forward.latest.items()} == {
        "svcA:v1": 8,
        "svcB:v1": 4,
    }


def test_merge_skips_records_without_tags() -> None:
    merger = ReplicationStatusMerger()
    untagged = ReplicationStatus(id=1, status="finished", repository="library/svcA")

    assert merger.merge([untagged]) == 0
    assert merger.latest == {}


class _StaticFetcher:
    def __init__(self, pages: Sequence[Sequence[ReplicationStatus]]) -> None:
        self.pages = pages
        self.policy_ids: list[int] = []

    def __call__(self, *, policy_id: int) -> Sequence[Sequence[ReplicationStatus]]:
        self.policy_ids.append(policy_id)
        return self.pages


class _FailingFetcher:
    def __call__(self, *, policy_id: int) -> Sequence[Sequence[ReplicationStatus]]:
        raise ReplicationFeedError(f"policy {policy_id} unavailable")


def test_refresh_merges_every_page() -> None:
    fetcher = _StaticFetcher([[_status(1, "running")], [_status(2, "finished")]])

    merger = refresh_replication_statuses(fetcher, policy_id=3)

    assert fetcher.policy_ids == [3]
    status = merger.status_for("svcA", "v1")
    assert status is not None
    assert status.is_finished


def test_refresh_feed_error_leaves_map_untouched() -> None:
    existing = ReplicationStatusMerger()
    existing.merge([_status(1, "running")])

    merger = refresh_replication_statuses(_FailingFetcher(), policy_id=1, merger=existing)

    assert merger is existing
    assert list(merger.latest) == ["svcA:v1"]
