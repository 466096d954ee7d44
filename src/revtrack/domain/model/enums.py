"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class DeployState(IntEnum):
    """Value of the persisted ``deployed`` column."""

    PENDING = 0
    DEPLOYED = 1


class Environment(StrEnum):
    """Production environments a UAT-approved tag can be promoted to."""

    ALPHA = "alpha"
    BETA = "beta"

    @property
    def flag_name(self) -> str:
        return f"prod_{self.value}"


class PendingReason(StrEnum):
    NEW = "new"
    CHANGED = "changed"
    UNDEPLOYED = "undeployed"
