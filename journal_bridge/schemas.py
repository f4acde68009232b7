from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any, Generic, Literal, TypeVar, Union

T = TypeVar("T")

# --- Envelopes ---
class SuccessResponse(BaseModel, Generic[T]):
    status: Literal["success"] = "success"
    result: Optional[T] = None

class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    message: str

# --- Toggl summary ---
class TogglSummaryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page_id: Optional[str] = Field(None, alias="pageId", json_schema_extra={'example': "1a2b3c4d5e6f"})

class ProjectTime(BaseModel):
    name: str
    time: str = Field(..., json_schema_extra={'example': "1h 25m"})

class TogglSummaryResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    journal_id: str = Field(..., alias="journalId")
    journal_url: Optional[str] = Field(None, alias="journalUrl")
    entries_count: int = Field(..., alias="entriesCount")
    total_time: str = Field(..., alias="totalTime")
    projects: List[ProjectTime]

# --- Journal ---
class LinkInput(BaseModel):
    title: str
    url: str

class BookmarkInput(BaseModel):
    url: str
    caption: Optional[str] = None

class JournalEntryInput(BaseModel):
    """Content appended to the latest journal page as one bulleted item."""
    text: Optional[str] = None
    embed: Optional[str] = None
    video: Optional[str] = None
    link: Optional[LinkInput] = None
    bookmark: Optional[BookmarkInput] = None

class JournalTaskResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    journal_id: str = Field(..., alias="journalId")
    journal_url: Optional[str] = Field(None, alias="journalUrl")
    tasks_added: int = Field(..., alias="tasksAdded")

# --- Tasks ---
class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, json_schema_extra={'example': "Write weekly review"})

class TaskItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    url: Optional[str] = None
    title: str
    status: Optional[str] = None
    date: Optional[str] = None
    project: Optional[Dict[str, Any]] = None
    estimate_hours: Union[float, str] = Field("-", alias="estimateHours")
    actual_hours: Union[float, str] = Field("-", alias="actualHours")

# --- Routine ---
class RoutineUpdate(BaseModel):
    title: str = Field(..., min_length=1)
    property: Optional[str] = None
