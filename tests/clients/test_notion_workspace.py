import httpx
import pytest
from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock

from notion_client.errors import HTTPResponseError

from journal_bridge.clients.notion import NotionWorkspace
from journal_bridge.core.exceptions import ConfigurationError, UnexpectedShapeError, UpstreamAPIError
from journal_bridge.core.settings import Settings
from journal_bridge.core.utils import JST

@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        NOTION_API_TOKEN="notion-token",
        NOTION_JOURNAL_DATABASE_ID="journal-db",
        NOTION_TASK_DATABASE_ID="task-db",
        NOTION_PROJECT_DATABASE_ID="project-db",
    )

@pytest.fixture
def client():
    client = MagicMock()
    client.databases.query = AsyncMock(return_value={"results": []})
    client.pages.update = AsyncMock(return_value={"object": "page"})
    client.pages.create = AsyncMock(return_value={"object": "page", "id": "new-task"})
    client.blocks.children.append = AsyncMock(return_value={"object": "list"})
    return client

@pytest.fixture
def workspace(client, settings):
    return NotionWorkspace(client, settings)

@pytest.mark.asyncio
async def test_get_latest_page(workspace, client):
    page = {"object": "page", "id": "journal-1", "url": "https://www.notion.so/journal-1"}
    client.databases.query.return_value = {"results": [page]}

    assert await workspace.get_latest_page() == page
    client.databases.query.assert_awaited_once_with(
        database_id="journal-db",
        page_size=1,
        sorts=[{"property": "Date", "direction": "descending"}],
    )

@pytest.mark.asyncio
async def test_latest_item_must_be_a_page(workspace, client):
    client.databases.query.return_value = {"results": [{"object": "database", "id": "x"}]}
    with pytest.raises(UnexpectedShapeError):
        await workspace.get_latest_page()

@pytest.mark.asyncio
async def test_latest_page_missing(workspace, client):
    with pytest.raises(UnexpectedShapeError, match="not a page"):
        await workspace.get_latest_page()

@pytest.mark.asyncio
async def test_missing_database_id_fails_before_query(client):
    workspace = NotionWorkspace(client, Settings(_env_file=None, NOTION_API_TOKEN="t", NOTION_JOURNAL_DATABASE_ID=None))
    with pytest.raises(ConfigurationError, match="NOTION_JOURNAL_DATABASE_ID is not defined"):
        await workspace.get_latest_page()
    client.databases.query.assert_not_awaited()

@pytest.mark.asyncio
async def test_upstream_error_is_mapped(workspace, client):
    client.databases.query.side_effect = HTTPResponseError(httpx.Response(502, text="bad gateway"))
    with pytest.raises(UpstreamAPIError) as exc_info:
        await workspace.get_latest_page()
    assert exc_info.value.status_code == 502
    assert exc_info.value.service == "Notion"

@pytest.mark.asyncio
async def test_get_today_tasks_filters_pages(workspace, client):
    task = {"object": "page", "id": "t1", "properties": {}}
    client.databases.query.return_value = {"results": [task, {"object": "database", "id": "d"}]}

    tasks = await workspace.get_today_tasks(date(2026, 10, 19))

    assert tasks == [task]
    kwargs = client.databases.query.await_args.kwargs
    assert kwargs["database_id"] == "task-db"
    assert kwargs["filter"] == {"property": "Date", "date": {"equals": "2026-10-19"}}

@pytest.mark.asyncio
async def test_update_journal_tasks_merges_relations(workspace, client):
    journal = {
        "id": "journal-1",
        "properties": {"Tasks": {"type": "relation", "relation": [{"id": "a"}, {"id": "b"}]}},
    }
    await workspace.update_journal_tasks(journal, [{"id": "b"}, {"id": "c"}])

    client.pages.update.assert_awaited_once_with(
        page_id="journal-1",
        properties={"Tasks": {"relation": [{"id": "a"}, {"id": "b"}, {"id": "c"}]}},
    )

@pytest.mark.asyncio
async def test_update_journal_tasks_requires_relation(workspace, client):
    journal = {"id": "journal-1", "properties": {"Tasks": {"type": "rich_text"}}}
    with pytest.raises(UnexpectedShapeError, match="Tasks relation"):
        await workspace.update_journal_tasks(journal, [])
    client.pages.update.assert_not_awaited()

@pytest.mark.asyncio
async def test_find_project_page(workspace, client):
    client.databases.query.return_value = {"results": [{"object": "page", "id": "page-web"}]}
    assert await workspace.find_project_page("Website") == "page-web"
    assert client.databases.query.await_args.kwargs["filter"] == {
        "property": "Project Name", "title": {"equals": "Website"},
    }

    client.databases.query.return_value = {"results": []}
    assert await workspace.find_project_page("Nothing") is None

@pytest.mark.asyncio
async def test_create_task(workspace, client):
    await workspace.create_task("Write review")
    client.pages.create.assert_awaited_once_with(
        parent={"database_id": "task-db"},
        properties={"Task": {"title": [{"text": {"content": "Write review"}}]}},
    )

@pytest.mark.asyncio
async def test_update_routine_project(workspace, client):
    month_start = datetime(2026, 10, 1, tzinfo=JST)
    month_end = datetime(2026, 11, 1, tzinfo=JST)
    client.databases.query.return_value = {"results": [{"object": "page", "id": "routine-1"}]}

    await workspace.update_routine_project("Run", 12, month_start, month_end)

    client.pages.update.assert_awaited_once_with(page_id="routine-1", properties={"分子": {"number": 12}})

@pytest.mark.asyncio
async def test_update_routine_project_not_found(workspace, client):
    month_start = datetime(2026, 10, 1, tzinfo=JST)
    month_end = datetime(2026, 11, 1, tzinfo=JST)
    with pytest.raises(UnexpectedShapeError, match="Project not found"):
        await workspace.update_routine_project("Run", 12, month_start, month_end)
