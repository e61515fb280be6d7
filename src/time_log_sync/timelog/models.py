"""Pydantic models for local time log entries."""

from datetime import date, time

from pydantic import BaseModel, ConfigDict


class TimeLogEntry(BaseModel):
    """A single record of the local time log."""

    model_config = ConfigDict(frozen=True)

    date: date
    start: time
    end: time
    service: str
    description: str = ""
