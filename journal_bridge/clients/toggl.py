"""
Toggl Track API client.
Fetches the journal day's time entries and the project list of a workspace.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from journal_bridge.core.exceptions import ConfigurationError, UpstreamAPIError
from journal_bridge.core.settings import DEFAULT_TOGGL_API_BASE, Settings
from journal_bridge.core.utils import JST, journal_day_window, journal_timezone, to_utc_iso
from journal_bridge.models import TimeEntry, TogglProject

log = logging.getLogger(__name__)


class TogglClient:
    """Thin async wrapper around the Toggl Track v9 REST API."""

    def __init__(
        self,
        api_token: Optional[str],
        base_url: str = DEFAULT_TOGGL_API_BASE,
        tz: timezone = JST,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_token:
            raise ConfigurationError("TOGGL_API_TOKEN")
        self.tz = tz
        self._http = httpx.AsyncClient(
            base_url=base_url,
            auth=(api_token, "api_token"),
            headers={"Content-Type": "application/json"},
            timeout=None,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "TogglClient":
        return cls(
            api_token=settings.require("TOGGL_API_TOKEN"),
            base_url=settings.TOGGL_API_BASE,
            tz=journal_timezone(settings.JOURNAL_UTC_OFFSET_HOURS),
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "TogglClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        response = await self._http.get(path, params=params)
        if not response.is_success:
            raise UpstreamAPIError("Toggl", response.status_code, response.reason_phrase)
        return response.json()

    async def get_time_entries(self, start: datetime, end: datetime) -> List[TimeEntry]:
        """Entries of the current user whose start lies in [start, end)."""
        data = await self._get(
            "/me/time_entries",
            params={"start_date": to_utc_iso(start), "end_date": to_utc_iso(end)},
        )
        entries = [TimeEntry.model_validate(item) for item in data or []]
        log.info(f"Fetched {len(entries)} Toggl time entries between {to_utc_iso(start)} and {to_utc_iso(end)}")
        return entries

    async def get_today_time_entries(self, now: Optional[datetime] = None) -> List[TimeEntry]:
        start, end = journal_day_window(now, self.tz)
        return await self.get_time_entries(start, end)

    async def get_projects(self, workspace_id: int) -> List[TogglProject]:
        data = await self._get(f"/workspaces/{workspace_id}/projects")
        return [TogglProject.model_validate(item) for item in data or []]
