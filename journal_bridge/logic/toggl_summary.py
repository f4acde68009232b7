# journal_bridge/logic/toggl_summary.py

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from journal_bridge import schemas
from journal_bridge.clients.notion import NotionWorkspace
from journal_bridge.clients.toggl import TogglClient
from journal_bridge.logic.aggregation import aggregate_entries, format_duration
from journal_bridge.logic.blocks import build_toggl_summary_blocks
from journal_bridge.logic.project_resolver import ProjectPageResolver, resolve_toggl_projects

log = logging.getLogger(__name__)


class TogglSummaryService:
    """Appends the journal day's Toggl summary to a Notion page."""

    def __init__(self, toggl: TogglClient, notion: NotionWorkspace):
        self.toggl = toggl
        self.notion = notion
        self.page_resolver = ProjectPageResolver(notion)

    async def publish(self, page_id: Optional[str] = None, now: Optional[datetime] = None) -> schemas.TogglSummaryResult:
        """
        Fetches today's entries, aggregates them per project and appends a
        heading + table fragment to the target page.

        Args:
            page_id: Target page. Defaults to the latest journal page.
            now: Reference instant for "today". Defaults to the wall clock.

        Returns:
            Summary of what was appended.
        """
        entries = await self.toggl.get_today_time_entries(now)
        project_map = await resolve_toggl_projects(self.toggl, entries)
        summary = aggregate_entries(entries, project_map)

        target_page = await self._target_page(page_id)
        page_map = await self.page_resolver.resolve(project.project_name for project in summary.projects)
        children = build_toggl_summary_blocks(summary, page_map, self.toggl.tz)

        # One append call carries the whole fragment
        await self.notion.append_children(target_page["id"], children)
        log.info(f"Appended Toggl summary ({len(summary.projects)} projects) to page {target_page['id']}")

        return schemas.TogglSummaryResult(
            journal_id=target_page["id"],
            journal_url=target_page.get("url"),
            entries_count=len(entries),
            total_time=format_duration(summary.total_seconds),
            projects=[
                schemas.ProjectTime(name=project.project_name, time=format_duration(project.total_seconds))
                for project in summary.projects
            ],
        )

    async def _target_page(self, page_id: Optional[str]) -> Dict[str, Any]:
        if page_id:
            return await self.notion.get_page(page_id)
        return await self.notion.get_latest_page()
