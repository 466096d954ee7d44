"""List service tags eligible for promotion, annotated with replication status."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from revtrack.domain.replication import ReplicationStatusMerger

if TYPE_CHECKING:
    from collections.abc import Collection

    from revtrack.domain.model import Environment
    from revtrack.domain.reconciliation import UnitOfWorkFactory

log = getLogger(__name__)

ALL_SENTINEL = "All"
EXCLUSION_SEPARATOR = "|"


def parse_exclusion_list(value: str | None) -> frozenset[str]:
    if not value:
        return frozenset()
    return frozenset(name.strip() for name in value.split(EXCLUSION_SEPARATOR) if name.strip())


def format_tag_list(entries: Collection[str]) -> str:
    return ",".join(entries)


@dataclass(slots=True)
class TagQueryService:
    unit_of_work_factory: UnitOfWorkFactory

    def query(
        self,
        environment: Environment,
        *,
        statuses: ReplicationStatusMerger | None = None,
        exclude: Collection[str] = (),
    ) -> list[str]:
        """Return ``All`` followed by ``service:tag[:status]`` for every eligible service.

        Eligible means approved in UAT and not yet promoted to ``environment``.
        A replication status is appended unless it is ``finished``.
        """

        merger = statuses or ReplicationStatusMerger()
        entries = [ALL_SENTINEL]
        with self.unit_of_work_factory() as uow:
            records = uow.repositories.tags.list_pending_promotion(environment)

        for record in records:
            if record.service_name in exclude:
                continue
            entry = f"{record.service_name}:{record.tag}"
            status = merger.status_for(record.service_name, record.tag)
            if status is not None and not status.is_finished:
                entry = f"{entry}:{status.status}"
            entries.append(entry)

        log.info(
            "Found %s tags awaiting promotion to %s",
            len(entries) - 1,
            environment,
        )
        return entries
