import logging
from typing import Optional
from fastapi import APIRouter

from journal_bridge import schemas
from journal_bridge.api.deps import NotionDep, TogglDep
from journal_bridge.api.errors import error_response
from journal_bridge.logic.toggl_summary import TogglSummaryService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post(
    "/toggl",
    response_model=schemas.SuccessResponse[schemas.TogglSummaryResult],
    responses={500: {"model": schemas.ErrorResponse}},
)
async def append_toggl_summary(
    toggl: TogglDep,
    notion: NotionDep,
    request_in: Optional[schemas.TogglSummaryRequest] = None,
):
    """
    Append today's Toggl summary (heading + per-project table) to a journal page.
    Without a `pageId` the latest journal page is used.
    """
    page_id = request_in.page_id if request_in else None
    try:
        result = await TogglSummaryService(toggl, notion).publish(page_id=page_id)
    except Exception as e:
        logger.exception(f"Error adding Toggl summary to journal: {e}")
        return error_response(e)
    return schemas.SuccessResponse[schemas.TogglSummaryResult](result=result)
