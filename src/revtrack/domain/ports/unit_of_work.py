"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from revtrack.domain.ports.persistence import (
        ServiceRevisionRepository,
        ServiceTagRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection.

    ``commit`` raises ``RecordWriteError`` when pending changes cannot be
    persisted; the caller decides whether that aborts the run.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class RevisionRepositories(RepositoryCollection):
    """Repositories backing revision reconciliation and promotion bookkeeping."""

    revisions: ServiceRevisionRepository
    tags: ServiceTagRepository


type RevisionUnitOfWork = UnitOfWork[RevisionRepositories]
