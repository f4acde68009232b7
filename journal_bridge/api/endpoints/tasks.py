from typing import Any, Dict, List
from fastapi import APIRouter

from journal_bridge import schemas
from journal_bridge.api.deps import NotionDep
from journal_bridge.core.exceptions import UnexpectedShapeError
from journal_bridge.core.utils import utc_now

router = APIRouter()

EXPECTED_TASK_PROPERTIES = {
    "Task": "title",
    "Status": "status",
    "Date": "date",
    "Estimate Hours": "number",
    "Actual Hours": "number",
}

def parse_task(task: Dict[str, Any]) -> schemas.TaskItem:
    """
    Flattens a Notion task page.

    Raises:
        UnexpectedShapeError: If a required property is missing or of another type.
    """
    properties = task.get("properties", {})
    for name, expected_type in EXPECTED_TASK_PROPERTIES.items():
        if properties.get(name, {}).get("type") != expected_type:
            raise UnexpectedShapeError("Task is not formatted correctly")

    title = properties["Task"]["title"]
    status = properties["Status"].get("status") or {}
    task_date = properties["Date"].get("date") or {}
    estimate = properties["Estimate Hours"].get("number")
    actual = properties["Actual Hours"].get("number")

    return schemas.TaskItem(
        id=task["id"],
        url=task.get("url"),
        title=title[0]["plain_text"] if title else "",
        status=status.get("name"),
        date=task_date.get("start"),
        project=properties.get("Project"),
        estimate_hours=estimate if estimate is not None else "-",
        actual_hours=actual if actual is not None else "-",
    )

@router.get("", response_model=schemas.SuccessResponse[List[schemas.TaskItem]])
async def read_open_tasks(notion: NotionDep):
    """Todo and in-progress tasks that are due, plus today's tasks."""
    tasks = await notion.list_open_tasks(utc_now())
    return schemas.SuccessResponse[List[schemas.TaskItem]](result=[parse_task(task) for task in tasks])

@router.post("", response_model=schemas.SuccessResponse[Dict[str, Any]])
async def create_task(task_in: schemas.TaskCreate, notion: NotionDep):
    result = await notion.create_task(task_in.title)
    return schemas.SuccessResponse[Dict[str, Any]](result=result)

@router.get("/new", response_model=schemas.SuccessResponse[Dict[str, Any]], response_model_exclude_none=True)
async def new_task_ping():
    return schemas.SuccessResponse[Dict[str, Any]]()

@router.post("/new", response_model=schemas.SuccessResponse[Dict[str, Any]])
async def create_new_task(task_in: schemas.TaskCreate, notion: NotionDep):
    result = await notion.create_task(task_in.title)
    return schemas.SuccessResponse[Dict[str, Any]](result=result)
