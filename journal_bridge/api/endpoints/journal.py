import logging
from typing import Any, Dict
from fastapi import APIRouter

from journal_bridge import schemas
from journal_bridge.api.deps import NotionDep, SettingsDep
from journal_bridge.api.errors import error_response
from journal_bridge.clients.notion import NotionWorkspace
from journal_bridge.core.utils import journal_timezone, journal_today
from journal_bridge.logic.blocks import build_text_entry_block

logger = logging.getLogger(__name__)

router = APIRouter()

class JournalTaskLinker:
    """Links today's tasks to the latest journal page."""

    def __init__(self, notion: NotionWorkspace, utc_offset_hours: int):
        self.notion = notion
        self.tz = journal_timezone(utc_offset_hours)

    async def link_today_tasks(self) -> schemas.JournalTaskResult:
        journal = await self.notion.get_latest_page()
        today_tasks = await self.notion.get_today_tasks(journal_today(tz=self.tz))
        await self.notion.update_journal_tasks(journal, today_tasks)
        logger.info(f"Linked {len(today_tasks)} tasks to journal page {journal['id']}")
        return schemas.JournalTaskResult(
            journal_id=journal["id"],
            journal_url=journal.get("url"),
            tasks_added=len(today_tasks),
        )

@router.get("", response_model=schemas.SuccessResponse[str])
async def read_legacy_latest_page_url(notion: NotionDep):
    """URL of the latest page of the legacy journal database."""
    latest_page = await notion.get_latest_page("NOTION_DATABASE_ID")
    return schemas.SuccessResponse[str](result=latest_page.get("url"))

@router.get("/latest", response_model=schemas.SuccessResponse[str])
async def read_latest_page_url(notion: NotionDep):
    latest_page = await notion.get_latest_page()
    return schemas.SuccessResponse[str](result=latest_page.get("url"))

@router.put("/latest", response_model=schemas.SuccessResponse[Dict[str, Any]])
async def append_to_latest_page(entry_in: schemas.JournalEntryInput, notion: NotionDep):
    """Append text, a link and optional bookmark/embed/video as one bulleted item."""
    latest_page = await notion.get_latest_page()
    result = await notion.append_children(latest_page["id"], [build_text_entry_block(entry_in)])
    return schemas.SuccessResponse[Dict[str, Any]](result=result)

@router.post(
    "/journal-task",
    response_model=schemas.SuccessResponse[schemas.JournalTaskResult],
    responses={500: {"model": schemas.ErrorResponse}},
)
async def link_tasks_to_journal(notion: NotionDep, settings: SettingsDep):
    """Add today's tasks to the Tasks relation of the latest journal page."""
    try:
        result = await JournalTaskLinker(notion, settings.JOURNAL_UTC_OFFSET_HOURS).link_today_tasks()
    except Exception as e:
        logger.exception(f"Error adding tasks to journal: {e}")
        return error_response(e)
    return schemas.SuccessResponse[schemas.JournalTaskResult](result=result)
