"""Write back deployment outcomes: deployed flags, UAT tags and promotions."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from revtrack.domain.model import Environment, ServiceTag
from revtrack.domain.ports.persistence import RecordReadError
from revtrack.domain.revision_log import service_name_from_descriptor
from revtrack.domain.store_writes import StoreWarning, best_effort_write

if TYPE_CHECKING:
    from collections.abc import Iterable

    from revtrack.domain.reconciliation import UnitOfWorkFactory

log = getLogger(__name__)

PROMOTION_SEPARATOR = ":"


@dataclass(frozen=True, slots=True)
class PromotionRequest:
    environment: Environment
    service_name: str
    tag: str


@dataclass(slots=True)
class DeploymentResult:
    commit_ids: list[str] = field(default_factory=list[str])
    warnings: list[StoreWarning] = field(default_factory=list[StoreWarning])

    @property
    def joined_commit_ids(self) -> str:
        return "|".join(self.commit_ids)


@dataclass(slots=True)
class TagWriteResult:
    written: list[str] = field(default_factory=list[str])
    warnings: list[StoreWarning] = field(default_factory=list[StoreWarning])


def parse_promotion_request(value: str) -> PromotionRequest:
    """Parse ``environment:service:tag``.

    Raises ``ValueError`` when a part is missing or the environment is unknown.
    """

    parts = value.strip().split(PROMOTION_SEPARATOR)
    if len(parts) != 3 or not all(parts):  # noqa: PLR2004
        raise ValueError(f"Expected environment:service:tag, got {value!r}")
    raw_environment, service_name, tag = parts
    try:
        environment = Environment(raw_environment)
    except ValueError as exc:
        raise ValueError(f"Unknown environment: {raw_environment}") from exc
    return PromotionRequest(environment=environment, service_name=service_name, tag=tag)


@dataclass(slots=True)
class DeploymentStatusUpdater:
    unit_of_work_factory: UnitOfWorkFactory

    def mark_deployed(self, descriptor_paths: Iterable[str]) -> DeploymentResult:
        """Flag the services behind ``descriptor_paths`` as deployed.

        Returns the commit ids of the records that exist; paths that do not
        name a build descriptor and services without a record are skipped.
        """

        result = DeploymentResult()
        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.revisions
            for path in descriptor_paths:
                service_name = service_name_from_descriptor(path.strip())
                if service_name is None:
                    log.debug("Skipping %r: not a build descriptor path", path)
                    continue
                try:
                    record = repository.get(service_name)
                except RecordReadError as exc:
                    log.warning("Could not read record for %s: %s", service_name, exc)
                    result.warnings.append(
                        StoreWarning(service_name=service_name, operation="read", message=str(exc))
                    )
                    continue
                if record is None:
                    log.debug("No revision record for %s", service_name)
                    continue

                with best_effort_write(
                    uow, result.warnings, service_name=service_name, operation="mark deployed"
                ):
                    record.mark_deployed()
                    repository.update(record)
                result.commit_ids.append(record.commit_id)

        log.info(
            "Marked %s services deployed (warnings=%s)",
            len(result.commit_ids),
            len(result.warnings),
        )
        return result

    def record_uat_tags(self, service_names: Iterable[str], tag: str) -> TagWriteResult:
        """Store ``tag`` as the UAT-approved image for every service."""

        result = TagWriteResult()
        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.tags
            for raw_name in service_names:
                service_name = raw_name.strip()
                if not service_name:
                    continue
                warnings_before = len(result.warnings)
                with best_effort_write(
                    uow, result.warnings, service_name=service_name, operation="tag"
                ):
                    record = repository.get(service_name)
                    if record is None:
                        record = ServiceTag(service_name=service_name)
                        record.assign_tag(tag)
                        repository.add(record)
                    else:
                        record.assign_tag(tag)
                        repository.update(record)
                if len(result.warnings) == warnings_before:
                    result.written.append(service_name)

        log.info("Recorded tag %s for %s services", tag, len(result.written))
        return result

    def promote(self, request: PromotionRequest) -> bool:
        """Mark ``service:tag`` as promoted to the requested environment.

        Returns ``False`` when no record matches the service and tag.
        """

        warnings: list[StoreWarning] = []
        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.tags
            record = repository.get_by_tag(request.service_name, request.tag)
            if record is None:
                log.info(
                    "No tag record for %s:%s, nothing to promote",
                    request.service_name,
                    request.tag,
                )
                return False
            with best_effort_write(
                uow, warnings, service_name=request.service_name, operation="promote"
            ):
                record.promote(request.environment)
                repository.update(record)

        if warnings:
            return False
        log.info(
            "Promoted %s:%s to %s",
            request.service_name,
            request.tag,
            request.environment,
        )
        return True
