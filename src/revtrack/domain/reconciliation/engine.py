"""Diff a parsed revision log against the persisted revision records."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from revtrack.domain.model import DeployState, PendingReason, ServiceRevision
from revtrack.domain.ports.persistence import RecordReadError
from revtrack.domain.revision_log import PathMarker
from revtrack.domain.store_writes import StoreWarning, best_effort_write

if TYPE_CHECKING:
    from revtrack.domain.ports.unit_of_work import RevisionUnitOfWork
    from revtrack.domain.revision_log import RevisionLog

log = getLogger(__name__)

UnitOfWorkFactory = Callable[[], "RevisionUnitOfWork"]


@dataclass(frozen=True, slots=True)
class PendingService:
    """A service that must be rebuilt and redeployed."""

    service_name: str
    revision: str
    commit_id: str
    reason: PendingReason

    @property
    def descriptor_path(self) -> str:
        return f"{self.service_name}{PathMarker.BUILD_DESCRIPTOR}"


@dataclass(slots=True)
class ReconciliationResult:
    pending: list[PendingService] = field(default_factory=list[PendingService])
    warnings: list[StoreWarning] = field(default_factory=list[StoreWarning])

    @property
    def service_names(self) -> set[str]:
        return {item.service_name for item in self.pending}

    def rebuild_list(self) -> str:
        return ",".join(item.descriptor_path for item in self.pending)


@dataclass(slots=True)
class SeedResult:
    seeded: int = 0
    warnings: list[StoreWarning] = field(default_factory=list[StoreWarning])


@dataclass(slots=True)
class ReconciliationEngine:
    """Compute the rebuild list and bring the revision store up to date."""

    unit_of_work_factory: UnitOfWorkFactory

    def reconcile(self, revision_log: RevisionLog) -> ReconciliationResult:
        """Emit every service whose latest revision is new, changed or not yet deployed.

        Reading the existing records is fatal on failure (``RecordReadError``
        propagates). Individual inserts and updates are best-effort.
        """

        result = ReconciliationResult()
        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.revisions
            existing = {record.service_name: record for record in repository.list_all()}

            for service_name, change_ids in revision_log.revisions.items():
                if not change_ids:
                    continue
                latest = change_ids[0]
                commit_id = revision_log.commit_id_for(latest)
                record = existing.get(service_name)

                if record is None:
                    result.pending.append(
                        PendingService(service_name, latest, commit_id, PendingReason.NEW)
                    )
                    with best_effort_write(
                        uow, result.warnings, service_name=service_name, operation="insert"
                    ):
                        repository.add(
                            ServiceRevision(
                                service_name=service_name,
                                rev_id=latest,
                                commit_id=commit_id,
                                deployed=DeployState.PENDING.value,
                            )
                        )
                elif record.rev_id != latest:
                    result.pending.append(
                        PendingService(service_name, latest, commit_id, PendingReason.CHANGED)
                    )
                    with best_effort_write(
                        uow, result.warnings, service_name=service_name, operation="update"
                    ):
                        record.advance(latest, commit_id)
                        repository.update(record)
                elif not record.is_deployed:
                    result.pending.append(
                        PendingService(
                            service_name, latest, record.commit_id, PendingReason.UNDEPLOYED
                        )
                    )

        log.info(
            "Reconciled %s services: pending=%s, store_warnings=%s",
            len(revision_log.revisions),
            len(result.pending),
            len(result.warnings),
        )
        return result

    def seed(self, revision_log: RevisionLog) -> SeedResult:
        """Record every parsed service at its latest revision as already deployed."""

        result = SeedResult()
        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.revisions
            for service_name, change_ids in revision_log.revisions.items():
                if not change_ids:
                    continue
                latest = change_ids[0]
                commit_id = revision_log.commit_id_for(latest)
                try:
                    record = repository.get(service_name)
                except RecordReadError as exc:
                    log.warning("Could not read record for %s: %s", service_name, exc)
                    result.warnings.append(
                        StoreWarning(service_name=service_name, operation="read", message=str(exc))
                    )
                    continue
                warnings_before = len(result.warnings)

                with best_effort_write(
                    uow, result.warnings, service_name=service_name, operation="seed"
                ):
                    if record is None:
                        repository.add(
                            ServiceRevision(
                                service_name=service_name,
                                rev_id=latest,
                                commit_id=commit_id,
                                deployed=DeployState.DEPLOYED.value,
                            )
                        )
                    else:
                        record.advance(latest, commit_id)
                        record.mark_deployed()
                        repository.update(record)

                if len(result.warnings) == warnings_before:
                    result.seeded += 1

        log.info("Seeded %s service entries (warnings=%s)", result.seeded, len(result.warnings))
        return result
