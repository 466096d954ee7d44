"""SQLAlchemy mapping metadata for the revtrack domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Integer,
    SmallInteger,
    String,
    Table,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

from revtrack.domain.model import DeployState, ServiceRevision, ServiceTag

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _utcnow() -> datetime:
    return datetime.now(UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

service_revision_table = Table(
    "service_revision",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("service_name", String(200), nullable=False, unique=True),
    Column("rev_id", String(64), nullable=True),
    Column("commit_id", String(16), nullable=True),
    Column("deployed", SmallInteger, nullable=False, default=DeployState.PENDING.value),
)

service_tag_table = Table(
    "service_tag",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("service_name", String(200), nullable=False, unique=True),
    Column("tag", String(50), nullable=False),
    Column("uat", SmallInteger, nullable=False, default=0),
    Column("prod_beta", SmallInteger, nullable=False, default=0),
    Column("prod_alpha", SmallInteger, nullable=False, default=0),
    Column("updated_at", UTCDateTime, nullable=True, default=_utcnow, onupdate=_utcnow),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(ServiceRevision, service_revision_table)
    mapper_registry.map_imperatively(ServiceTag, service_tag_table)

    configure_mappers()
    return mapper_registry

