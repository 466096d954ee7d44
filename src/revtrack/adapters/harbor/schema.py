"""Pydantic models describing the Harbor replication job payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class HarborBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ReplicationJobPayload(HarborBaseModel):
    id: int
    status: str
    repository: str
    policy_id: int | None = None
    operation: str = ""
    tags: list[str] = Field(default_factory=list)
    creation_time: str = ""
    update_time: str = ""

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags_to_empty(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("operation", "creation_time", "update_time", mode="before")
    @classmethod
    def _null_to_blank(cls, value: object) -> object:
        return "" if value is None else value


ReplicationJobPage = TypeAdapter(list[ReplicationJobPayload])
