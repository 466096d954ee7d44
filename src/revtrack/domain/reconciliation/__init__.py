"""Revision reconciliation against the persisted store."""

from __future__ import annotations

from .engine import (
    PendingService,
    ReconciliationEngine,
    ReconciliationResult,
    SeedResult,
    UnitOfWorkFactory,
)

__all__ = [
    "PendingService",
    "ReconciliationEngine",
    "ReconciliationResult",
    "SeedResult",
    "UnitOfWorkFactory",
]
