"""Pydantic models for TimeCamp API payloads."""

from datetime import date, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TimeCampUser(BaseModel):
    """TimeCamp user model."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    user_id: str


class TimeCampTask(BaseModel):
    """TimeCamp task model. A parent_id of 0 marks a root task."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    task_id: int
    parent_id: int = 0
    name: str


class TimeCampEntry(BaseModel):
    """TimeCamp time entry model."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: int | None = None
    user_id: str
    date: date
    start: time = Field(alias="start_time")
    end: time = Field(alias="end_time")
    task_id: int
    name: str = ""
    description: str = ""

    @field_validator("name", "description", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def content_key(self) -> tuple[Any, ...]:
        """Identity of the entry ignoring the remote-assigned id.

        Entries built from the local log never carry an id, so this is what
        decides whether a local entry already exists remotely.
        """
        return (
            self.user_id,
            self.date,
            self.start,
            self.end,
            self.task_id,
            self.name,
            self.description,
        )

    def to_api_dict(self) -> dict[str, Any]:
        """Convert to API-compatible dictionary.

        Returns:
            Dictionary for API submission, without "id" for new entries.
        """
        payload: dict[str, Any] = {
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "start_time": self.start.strftime("%H:%M:%S"),
            "end_time": self.end.strftime("%H:%M:%S"),
            "task_id": str(self.task_id),
            "name": self.name,
            "description": self.description,
        }
        if self.id:
            payload["id"] = self.id
        return payload
