"""Ports for the persisted revision and tag stores."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from revtrack.domain.model import Environment, ServiceRevision, ServiceTag


class StoreError(RuntimeError):
    """Base class for persisted store failures surfaced to the domain."""


class RecordReadError(StoreError):
    """Raised when records cannot be read from the store."""


class RecordWriteError(StoreError):
    """Raised when a single record insert or update cannot be persisted."""


@runtime_checkable
class ServiceRevisionRepository(Protocol):
    """Persistence contract for per-service revision records."""

    def list_all(self) -> Sequence[ServiceRevision]: ...

    def get(self, service_name: str) -> ServiceRevision | None: ...

    def add(self, record: ServiceRevision) -> None: ...

    def update(self, record: ServiceRevision) -> None: ...


@runtime_checkable
class ServiceTagRepository(Protocol):
    """Persistence contract for per-service tag/promotion records."""

    def get(self, service_name: str) -> ServiceTag | None: ...

    def get_by_tag(self, service_name: str, tag: str) -> ServiceTag | None: ...

    def list_pending_promotion(self, environment: Environment) -> Sequence[ServiceTag]:
        """Records approved in UAT but not yet promoted to ``environment``."""
        ...

    def add(self, record: ServiceTag) -> None: ...

    def update(self, record: ServiceTag) -> None: ...
