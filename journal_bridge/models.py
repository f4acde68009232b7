# journal_bridge/models.py

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime

from journal_bridge.core.utils import parse_instant


# --- Models for data coming from the Toggl Track API ---
class TimeEntry(BaseModel):
    """A single tracked interval as returned by GET /me/time_entries."""
    model_config = ConfigDict(frozen=True, extra='ignore')

    id: int
    description: Optional[str] = None
    start: datetime
    stop: Optional[datetime] = None
    duration: int # seconds; negative while the timer is running
    project_id: Optional[int] = None
    workspace_id: int

    @field_validator('start', 'stop', mode='before')
    @classmethod
    def ensure_utc(cls, v):
        if v is None:
            return None
        if isinstance(v, (str, datetime)):
            return parse_instant(v)
        raise ValueError("Invalid datetime format")

    @property
    def is_running(self) -> bool:
        return self.duration < 0


class TogglProject(BaseModel):
    model_config = ConfigDict(extra='ignore')

    id: int
    name: str


# --- Models for aggregation ---
class EntryLine(BaseModel):
    """One aggregated entry inside a project bucket."""
    description: str
    seconds: int
    start: datetime
    stop: Optional[datetime] = None


class ProjectSummary(BaseModel):
    """Time spent on one resolved project name during the journal day."""
    project_name: str
    total_seconds: int = 0
    entries: List[EntryLine] = Field(default_factory=list)


class DailyTogglSummary(BaseModel):
    """Result of aggregating one day of time entries."""
    projects: List[ProjectSummary] = Field(default_factory=list)
    total_seconds: int = 0
    range_start: Optional[datetime] = None
    range_end: Optional[datetime] = None
