# journal_bridge/logic/project_resolver.py

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from journal_bridge.clients.notion import NotionWorkspace
from journal_bridge.clients.toggl import TogglClient
from journal_bridge.logic.aggregation import SENTINEL_PROJECT_NAMES
from journal_bridge.models import TimeEntry, TogglProject

logger = logging.getLogger(__name__)

def build_project_map(projects: Iterable[TogglProject]) -> Dict[int, str]:
    return {project.id: project.name for project in projects}

async def resolve_toggl_projects(toggl: TogglClient, entries: Sequence[TimeEntry]) -> Dict[int, str]:
    """
    Maps Toggl project ids to names for the workspace of the first entry.

    All entries of one run are assumed to share that workspace.
    """
    if not entries:
        return {}

    workspace_id = entries[0].workspace_id
    other_workspaces = {entry.workspace_id for entry in entries} - {workspace_id}
    if other_workspaces:
        logger.debug(f"Entries span workspaces {sorted(other_workspaces)}; resolving against {workspace_id} only")

    projects = await toggl.get_projects(workspace_id)
    return build_project_map(projects)

class ProjectPageResolver:
    """
    Resolves Toggl project names to Notion project pages.

    Each name is looked up independently; a failing lookup only loses the
    link for that name.
    """
    def __init__(self, notion: NotionWorkspace):
        self.notion = notion

    async def resolve(self, project_names: Iterable[str]) -> Dict[str, str]:
        if not self.notion.has_project_database:
            logger.warning("NOTION_PROJECT_DATABASE_ID is not defined; project cells will not be linked.")
            return {}

        names: List[str] = []
        for name in project_names:
            if name not in SENTINEL_PROJECT_NAMES and name not in names:
                names.append(name)

        results = await asyncio.gather(*(self._lookup(name) for name in names))
        page_map = {name: page_id for name, page_id in results if page_id}
        logger.info(f"Linked {len(page_map)}/{len(names)} projects to Notion pages")
        return page_map

    async def _lookup(self, name: str) -> Tuple[str, Optional[str]]:
        try:
            return name, await self.notion.find_project_page(name)
        except Exception as e:
            logger.warning(f"Project page lookup failed for '{name}': {e}")
            return name, None
