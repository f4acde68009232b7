from typing import Annotated, AsyncGenerator
from fastapi import Depends

from journal_bridge.clients.notion import NotionWorkspace
from journal_bridge.clients.toggl import TogglClient
from journal_bridge.core.settings import Settings, get_settings

SettingsDep = Annotated[Settings, Depends(get_settings)]

async def get_toggl_client(settings: SettingsDep) -> AsyncGenerator[TogglClient, None]:
    """
    Dependency to get a Toggl client for one request.
    Ensures the underlying HTTP client is closed after the request.
    """
    client = TogglClient.from_settings(settings)
    try:
        yield client
    finally:
        await client.aclose()

async def get_notion_workspace(settings: SettingsDep) -> AsyncGenerator[NotionWorkspace, None]:
    workspace = NotionWorkspace.from_settings(settings)
    try:
        yield workspace
    finally:
        await workspace.aclose()

TogglDep = Annotated[TogglClient, Depends(get_toggl_client)]
NotionDep = Annotated[NotionWorkspace, Depends(get_notion_workspace)]
