"""Replication job status as reported by the image registry."""

from __future__ import annotations

from dataclasses import dataclass, field

FINISHED_STATUS = "finished"


@dataclass(frozen=True, slots=True, kw_only=True)
class ReplicationStatus:
    id: int
    status: str
    repository: str
    tags: tuple[str, ...] = field(default_factory=tuple)
    policy_id: int | None = None
    operation: str = ""
    creation_time: str = ""
    update_time: str = ""

    @property
    def service_name(self) -> str:
        """Repository name without its project prefix (``project/svc`` -> ``svc``)."""
        return self.repository[self.repository.find("/") + 1 :]

    @property
    def latest_tag(self) -> str | None:
        return self.tags[-1] if self.tags else None

    @property
    def is_finished(self) -> bool:
        return self.status == FINISHED_STATUS
