import logging
from fastapi import APIRouter

from journal_bridge import schemas
from journal_bridge.api.deps import NotionDep, SettingsDep
from journal_bridge.core.utils import journal_month_window, journal_timezone

logger = logging.getLogger(__name__)

router = APIRouter()

@router.put("/routine", response_model=schemas.SuccessResponse[int])
async def update_routine_count(routine_in: schemas.RoutineUpdate, notion: NotionDep, settings: SettingsDep):
    """
    Count this month's journal pages with the routine checkbox ticked and store
    the count on the matching routine project.
    """
    month_start, month_end = journal_month_window(tz=journal_timezone(settings.JOURNAL_UTC_OFFSET_HOURS))
    checkbox_property = routine_in.property or routine_in.title

    count = await notion.count_checked_routines(checkbox_property, month_start, month_end)
    logger.info(f"Routine '{checkbox_property}' checked {count} times since {month_start.date()}")
    await notion.update_routine_project(routine_in.title, count, month_start, month_end)
    return schemas.SuccessResponse[int](result=count)
