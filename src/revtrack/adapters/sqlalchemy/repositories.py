"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from revtrack.adapters.sqlalchemy.mappings import service_revision_table, service_tag_table
from revtrack.domain.model import Environment, ServiceRevision, ServiceTag
from revtrack.domain.ports.persistence import RecordReadError

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.orm import Session


class SqlAlchemyServiceRevisionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_all(self) -> list[ServiceRevision]:
        stmt = select(ServiceRevision).order_by(service_revision_table.c.id)
        try:
            return list(self.session.scalars(stmt))
        except SQLAlchemyError as exc:
            raise RecordReadError("Could not list service revisions") from exc

    def get(self, service_name: str) -> ServiceRevision | None:
        stmt = (
            select(ServiceRevision)
            .where(service_revision_table.c.service_name == service_name)
            .limit(1)
        )
        try:
            return self.session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise RecordReadError(f"Could not read revision of {service_name}") from exc

    def add(self, record: ServiceRevision) -> None:
        self.session.add(record)

    def update(self, record: ServiceRevision) -> None:
        # persistent instances are tracked by the session already
        self.session.add(record)


class SqlAlchemyServiceTagRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, service_name: str) -> ServiceTag | None:
        stmt = select(ServiceTag).where(service_tag_table.c.service_name == service_name)
        return self._one_or_none(stmt, service_name)

    def get_by_tag(self, service_name: str, tag: str) -> ServiceTag | None:
        stmt = (
            select(ServiceTag)
            .where(service_tag_table.c.service_name == service_name)
            .where(service_tag_table.c.tag == tag)
        )
        return self._one_or_none(stmt, service_name)

    def list_pending_promotion(self, environment: Environment) -> list[ServiceTag]:
        flag_column = service_tag_table.c[environment.flag_name]
        stmt = (
            select(ServiceTag)
            .where(service_tag_table.c.uat == 1)
            .where(flag_column == 0)
            .order_by(service_tag_table.c.service_name)
        )
        try:
            return list(self.session.scalars(stmt))
        except SQLAlchemyError as exc:
            raise RecordReadError(f"Could not query tags pending {environment}") from exc

    def add(self, record: ServiceTag) -> None:
        self.session.add(record)

    def update(self, record: ServiceTag) -> None:
        self.session.add(record)

    def _one_or_none(self, stmt: Select[tuple[ServiceTag]], service_name: str) -> ServiceTag | None:
        try:
            return cast("ServiceTag | None", self.session.scalars(stmt.limit(1)).first())
        except SQLAlchemyError as exc:
            raise RecordReadError(f"Could not read tag of {service_name}") from exc


if TYPE_CHECKING:
    from revtrack.domain.ports.persistence import (
        ServiceRevisionRepository,
        ServiceTagRepository,
    )

    _session_stub = cast("Session", object())
    _revision_repo: ServiceRevisionRepository = SqlAlchemyServiceRevisionRepository(_session_stub)
    _tag_repo: ServiceTagRepository = SqlAlchemyServiceTagRepository(_session_stub)
