"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import ReplicationFeedError, ReplicationStatusFetcher
from .persistence import (
    RecordReadError,
    RecordWriteError,
    ServiceRevisionRepository,
    ServiceTagRepository,
    StoreError,
)
from .unit_of_work import (
    RepositoryCollection,
    RevisionRepositories,
    RevisionUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "RecordReadError",
    "RecordWriteError",
    "ReplicationFeedError",
    "ReplicationStatusFetcher",
    "RepositoryCollection",
    "RevisionRepositories",
    "RevisionUnitOfWork",
    "ServiceRevisionRepository",
    "ServiceTagRepository",
    "StoreError",
    "UnitOfWork",
]
