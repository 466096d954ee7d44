"""Persisted per-service revision and tag records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from revtrack.domain.model.enums import DeployState, Environment

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class ServiceRevision:
    """Latest known revision of one service and whether it has been deployed."""

    service_name: str
    rev_id: str = ""
    commit_id: str = ""
    deployed: int = DeployState.PENDING.value
    id: int | None = None

    @property
    def is_deployed(self) -> bool:
        return self.deployed == DeployState.DEPLOYED.value

    def advance(self, rev_id: str, commit_id: str) -> None:
        """Move to a new revision; the service must be rebuilt and redeployed."""
        self.rev_id = rev_id
        self.commit_id = commit_id
        self.deployed = DeployState.PENDING.value

    def mark_deployed(self) -> None:
        self.deployed = DeployState.DEPLOYED.value


@dataclass(eq=False, kw_only=True)
class ServiceTag:
    """The image tag last deployed to UAT for a service, with promotion flags."""

    service_name: str
    tag: str = ""
    uat: int = 0
    prod_beta: int = 0
    prod_alpha: int = 0
    id: int | None = None
    updated_at: datetime | None = field(default=None, compare=False)

    def assign_tag(self, tag: str) -> None:
        """Record a fresh UAT deployment. A new tag invalidates earlier promotions."""
        self.tag = tag
        self.uat = 1
        self.prod_beta = 0
        self.prod_alpha = 0

    def promote(self, environment: Environment) -> None:
        setattr(self, environment.flag_name, 1)

    def is_promoted(self, environment: Environment) -> bool:
        return getattr(self, environment.flag_name) == 1
