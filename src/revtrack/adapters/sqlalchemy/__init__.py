"""SQLAlchemy adapter package for revtrack."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import SqlAlchemyServiceRevisionRepository, SqlAlchemyServiceTagRepository
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyServiceRevisionRepository",
    "SqlAlchemyServiceTagRepository",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "configured_engine",
    "is_started",
    "mapper_registry",
    "shutdown",
    "startup",
]
