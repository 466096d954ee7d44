"""Best-effort record writes.

Each record mutation is committed on its own. When the store rejects one, the
unit of work is rolled back, a ``StoreWarning`` is recorded and processing of
the remaining services continues; the next run re-detects the same diff.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from revtrack.domain.ports.persistence import RecordWriteError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from revtrack.domain.ports.unit_of_work import RevisionUnitOfWork

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoreWarning:
    """A record mutation that did not persist."""

    service_name: str
    operation: str
    message: str


@contextmanager
def best_effort_write(
    uow: RevisionUnitOfWork,
    warnings: list[StoreWarning],
    *,
    service_name: str,
    operation: str,
) -> Iterator[None]:
    """Commit the writes staged in the block, downgrading failures to warnings."""

    try:
        yield
        uow.commit()
    except RecordWriteError as exc:
        uow.rollback()
        log.warning("Could not %s record for %s: %s", operation, service_name, exc)
        warnings.append(
            StoreWarning(service_name=service_name, operation=operation, message=str(exc))
        )
