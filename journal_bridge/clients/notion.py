"""
Notion workspace access for the journal bridge.

All reads and writes against the journal, task and project databases go
through NotionWorkspace so upstream failures surface as UpstreamAPIError.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from notion_client import AsyncClient
from notion_client.errors import HTTPResponseError

from journal_bridge.core.exceptions import UnexpectedShapeError, UpstreamAPIError
from journal_bridge.core.settings import Settings
from journal_bridge.core.utils import to_utc_iso

log = logging.getLogger(__name__)

TASK_RELATION_PROPERTY_NAME = "Tasks"
PROJECT_TITLE_PROPERTY_NAME = "Project Name"


class NotionWorkspace:
    """Journal, task and project databases of one Notion workspace."""

    def __init__(self, client: AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotionWorkspace":
        return cls(AsyncClient(auth=settings.require("NOTION_API_TOKEN")), settings)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "NotionWorkspace":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _call(self, operation, **kwargs) -> Dict[str, Any]:
        try:
            return await operation(**kwargs)
        except HTTPResponseError as e:
            raise UpstreamAPIError("Notion", e.status, str(e)) from e

    async def _query(self, database_key: str, **kwargs) -> Dict[str, Any]:
        database_id = self.settings.require(database_key)
        return await self._call(self.client.databases.query, database_id=database_id, **kwargs)

    # --- Journal ---

    async def get_latest_page(self, database_key: str = "NOTION_JOURNAL_DATABASE_ID") -> Dict[str, Any]:
        """Most recent page of a journal database by its Date property."""
        response = await self._query(
            database_key,
            page_size=1,
            sorts=[{"property": "Date", "direction": "descending"}],
        )
        results = response.get("results", [])
        latest_page = results[0] if results else None
        if not latest_page or latest_page.get("object") != "page":
            raise UnexpectedShapeError("Latest item in journal database is not a page")
        return latest_page

    async def get_page(self, page_id: str) -> Dict[str, Any]:
        page = await self._call(self.client.pages.retrieve, page_id=page_id)
        if page.get("object") != "page":
            raise UnexpectedShapeError(f"{page_id} is not a page")
        return page

    async def append_children(self, block_id: str, children: List[Dict[str, Any]]) -> Dict[str, Any]:
        return await self._call(self.client.blocks.children.append, block_id=block_id, children=children)

    # --- Tasks ---

    async def get_today_tasks(self, today: date) -> List[Dict[str, Any]]:
        response = await self._query(
            "NOTION_TASK_DATABASE_ID",
            filter={"property": "Date", "date": {"equals": today.isoformat()}},
            sorts=[{"property": "Status", "direction": "ascending"}],
        )
        return [
            task for task in response.get("results", [])
            if task.get("object") == "page" and "properties" in task
        ]

    async def update_journal_tasks(self, journal: Dict[str, Any], tasks_to_add: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Adds task pages to the journal's Tasks relation, keeping existing links first."""
        existing = journal.get("properties", {}).get(TASK_RELATION_PROPERTY_NAME)
        if not existing or existing.get("type") != "relation":
            raise UnexpectedShapeError("Journal does not have a Tasks relation property")

        combined_ids = [relation["id"] for relation in existing.get("relation", [])]
        for task in tasks_to_add:
            if task["id"] not in combined_ids:
                combined_ids.append(task["id"])

        return await self._call(
            self.client.pages.update,
            page_id=journal["id"],
            properties={TASK_RELATION_PROPERTY_NAME: {"relation": [{"id": task_id} for task_id in combined_ids]}},
        )

    async def list_open_tasks(self, now: datetime) -> List[Dict[str, Any]]:
        """Todo/In progress tasks dated up to now, plus anything dated exactly now."""
        now_iso = to_utc_iso(now)
        response = await self._query(
            "NOTION_TASK_DATABASE_ID",
            filter={
                "or": [
                    {"and": [
                        {"property": "Status", "status": {"equals": "Todo"}},
                        {"property": "Date", "date": {"on_or_before": now_iso}},
                    ]},
                    {"and": [
                        {"property": "Status", "status": {"equals": "In progress"}},
                        {"property": "Date", "date": {"on_or_before": now_iso}},
                    ]},
                    {"property": "Date", "date": {"equals": now_iso}},
                ]
            },
            sorts=[{"property": "Status", "direction": "descending"}],
        )
        return [
            task for task in response.get("results", [])
            if task.get("object") == "page" and "properties" in task
        ]

    async def create_task(self, title: str) -> Dict[str, Any]:
        database_id = self.settings.require("NOTION_TASK_DATABASE_ID")
        return await self._call(
            self.client.pages.create,
            parent={"database_id": database_id},
            properties={"Task": {"title": [{"text": {"content": title}}]}},
        )

    # --- Projects ---

    @property
    def has_project_database(self) -> bool:
        return bool(self.settings.NOTION_PROJECT_DATABASE_ID)

    async def find_project_page(self, name: str) -> Optional[str]:
        """Id of the project page whose title is exactly `name`, if any."""
        response = await self._query(
            "NOTION_PROJECT_DATABASE_ID",
            filter={"property": PROJECT_TITLE_PROPERTY_NAME, "title": {"equals": name}},
            page_size=1,
        )
        results = response.get("results", [])
        return results[0]["id"] if results else None

    # --- Routines ---

    async def count_checked_routines(self, checkbox_property: str, month_start: datetime, month_end: datetime) -> int:
        response = await self._query(
            "NOTION_JOURNAL_DATABASE_ID",
            filter={
                "and": [
                    {"property": "Date", "date": {"on_or_after": month_start.isoformat()}},
                    {"property": "Date", "date": {"before": month_end.isoformat()}},
                    {"property": checkbox_property, "checkbox": {"equals": True}},
                ]
            },
        )
        return len(response.get("results", []))

    async def update_routine_project(self, title: str, value: int, month_start: datetime, month_end: datetime) -> Dict[str, Any]:
        response = await self._query(
            "NOTION_PROJECT_DATABASE_ID",
            filter={
                "and": [
                    {"property": PROJECT_TITLE_PROPERTY_NAME, "title": {"starts_with": title}},
                    {"property": "Status", "status": {"equals": "Planned"}},
                    {"property": "Date", "date": {"on_or_after": month_start.isoformat()}},
                    {"property": "Date", "date": {"before": month_end.isoformat()}},
                    {"property": "Type", "select": {"equals": "Routine"}},
                ]
            },
        )
        results = response.get("results", [])
        if not results:
            raise UnexpectedShapeError("Project not found")
        project_id = results[0]["id"]
        log.info(f"Setting {self.settings.ROUTINE_VALUE_PROPERTY}={value} on routine project {project_id}")
        return await self._call(
            self.client.pages.update,
            page_id=project_id,
            properties={self.settings.ROUTINE_VALUE_PROPERTY: {"number": value}},
        )
