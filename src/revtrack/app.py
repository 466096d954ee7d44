"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from revtrack.adapters.harbor import HarborReplicationFetcher
from revtrack.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from revtrack.config import get_database_config, get_harbor_config
from revtrack.domain.deployment import (
    DeploymentResult,
    DeploymentStatusUpdater,
    TagWriteResult,
    parse_promotion_request,
)
from revtrack.domain.model import Environment
from revtrack.domain.reconciliation import (
    ReconciliationEngine,
    ReconciliationResult,
    SeedResult,
    UnitOfWorkFactory,
)
from revtrack.domain.replication import refresh_replication_statuses
from revtrack.domain.revision_log import describe_revision_log, read_revision_log
from revtrack.domain.tag_query import TagQueryService

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable
    from pathlib import Path

    from revtrack.config import HarborConfig
    from revtrack.domain.ports.fetching import ReplicationStatusFetcher
    from revtrack.domain.revision_log import ParserConfig

log = getLogger(__name__)


def _default_unit_of_work(
    unit_of_work_factory: UnitOfWorkFactory | None,
    *,
    database_uri: str | None,
    db_host: str | None,
) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup(database_uri=database_uri or get_database_config(host=db_host).uri)
    return SqlAlchemyUnitOfWork


def resolve_pending_services(
    log_path: str | Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    parser_config: ParserConfig | None = None,
    database_uri: str | None = None,
    db_host: str | None = None,
) -> ReconciliationResult:
    """Parse the revision log and reconcile it against the revision store."""

    revision_log = read_revision_log(log_path, config=parser_config)
    log.debug("Parsed revision index:\n%s", describe_revision_log(revision_log))
    engine = ReconciliationEngine(
        _default_unit_of_work(unit_of_work_factory, database_uri=database_uri, db_host=db_host)
    )
    return engine.reconcile(revision_log)


def seed_service_revisions(
    log_path: str | Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    parser_config: ParserConfig | None = None,
    database_uri: str | None = None,
    db_host: str | None = None,
) -> SeedResult:
    """Record every service in the revision log as deployed at its latest revision."""

    revision_log = read_revision_log(log_path, config=parser_config)
    engine = ReconciliationEngine(
        _default_unit_of_work(unit_of_work_factory, database_uri=database_uri, db_host=db_host)
    )
    return engine.seed(revision_log)


def record_deployment(
    descriptor_paths: Iterable[str],
    service_names: Iterable[str],
    tag: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    database_uri: str | None = None,
    db_host: str | None = None,
) -> tuple[DeploymentResult, TagWriteResult]:
    """Mark the built modules deployed and record ``tag`` as the UAT image of each service.

    ``descriptor_paths`` are the ``<service>/pom.xml`` tokens of the rebuild
    list; ``service_names`` are the image repositories that were pushed.
    """

    updater = DeploymentStatusUpdater(
        _default_unit_of_work(unit_of_work_factory, database_uri=database_uri, db_host=db_host)
    )
    deployment = updater.mark_deployed(descriptor_paths)
    tags = updater.record_uat_tags(service_names, tag)
    return deployment, tags


def promote_service_tag(
    value: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    database_uri: str | None = None,
    db_host: str | None = None,
) -> bool:
    """Apply an ``environment:service:tag`` promotion. Raises ``ValueError`` on bad input."""

    request = parse_promotion_request(value)
    updater = DeploymentStatusUpdater(
        _default_unit_of_work(unit_of_work_factory, database_uri=database_uri, db_host=db_host)
    )
    return updater.promote(request)


def list_promotable_tags(
    environment: Environment | str,
    *,
    exclude: Collection[str] = (),
    fetcher: ReplicationStatusFetcher | None = None,
    harbor_config: HarborConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    database_uri: str | None = None,
    db_host: str | None = None,
) -> list[str]:
    """List ``All`` plus every tag awaiting promotion, annotated with replication status."""

    target = Environment(environment)
    config = harbor_config or get_harbor_config()
    statuses = refresh_replication_statuses(
        fetcher or HarborReplicationFetcher(config=config),
        policy_id=config.policy_id_for(target.value),
    )
    service = TagQueryService(
        _default_unit_of_work(unit_of_work_factory, database_uri=database_uri, db_host=db_host)
    )
    return service.query(target, statuses=statuses, exclude=exclude)

