# journal_bridge/logic/blocks.py
"""
Builders for Notion block payloads.
Pure transforms: nothing here talks to the network.
"""

import re
from datetime import timezone
from typing import Any, Dict, List, Mapping, Optional

import emoji

from journal_bridge import schemas
from journal_bridge.core.utils import JST
from journal_bridge.logic.aggregation import format_duration, format_time_range, merge_descriptions
from journal_bridge.models import DailyTogglSummary, ProjectSummary

URL_PATTERN = re.compile(r"(https?://\S+)")
TOGGL_TABLE_HEADER = ["Project", "Time", "Details"]


def text_run(content: str, url: Optional[str] = None) -> Dict[str, Any]:
    text: Dict[str, Any] = {"content": content}
    if url:
        text["link"] = {"url": url}
    return {"type": "text", "text": text}


def page_mention(page_id: str) -> Dict[str, Any]:
    return {"type": "mention", "mention": {"type": "page", "page": {"id": page_id}}}


def make_table_row(cells: List[List[Dict[str, Any]]]) -> Dict[str, Any]:
    return {
        "object": "block",
        "type": "table_row",
        "table_row": {"cells": cells},
    }


def format_details(summary: ProjectSummary) -> str:
    return "\n".join(
        f"• {description} ({format_duration(seconds)})"
        for description, seconds in merge_descriptions(summary.entries)
    )


def build_project_row(summary: ProjectSummary, page_map: Mapping[str, str]) -> Dict[str, Any]:
    page_id = page_map.get(summary.project_name)
    project_cell = [page_mention(page_id)] if page_id else [text_run(summary.project_name)]
    return make_table_row([
        project_cell,
        [text_run(format_duration(summary.total_seconds))],
        [text_run(format_details(summary))],
    ])


def toggl_heading_text(summary: DailyTogglSummary, tz: timezone = JST) -> str:
    return f"⏱ Toggl ({format_duration(summary.total_seconds)}){format_time_range(summary, tz)}"


def build_toggl_summary_blocks(
    summary: DailyTogglSummary,
    page_map: Mapping[str, str],
    tz: timezone = JST,
) -> List[Dict[str, Any]]:
    """
    Heading plus a Project | Time | Details table, one row per project.

    Project cells link to the Notion page found in `page_map`, otherwise they
    hold the project name as plain text.
    """
    header_row = make_table_row([[text_run(label)] for label in TOGGL_TABLE_HEADER])
    data_rows = [build_project_row(project, page_map) for project in summary.projects]

    return [
        {
            "object": "block",
            "type": "heading_3",
            "heading_3": {"rich_text": [text_run(toggl_heading_text(summary, tz))]},
        },
        {
            "object": "block",
            "type": "table",
            "table": {
                "table_width": len(TOGGL_TABLE_HEADER),
                "has_column_header": True,
                "has_row_header": False,
                "children": [header_row, *data_rows],
            },
        },
    ]


def emojize(text: str) -> str:
    """Replaces :shortcode: aliases with emoji; unknown shortcodes stay as typed."""
    return emoji.emojize(text, language="alias")


def linkify(text: str) -> List[Dict[str, Any]]:
    """Splits text into plain runs and linked runs for every http(s) URL."""
    rich_text = []
    for index, part in enumerate(URL_PATTERN.split(text)):
        if not part:
            continue
        # odd indices are the captured URLs
        rich_text.append(text_run(part, url=part) if index % 2 else text_run(part))
    return rich_text


def build_text_entry_block(entry: schemas.JournalEntryInput) -> Dict[str, Any]:
    rich_text: List[Dict[str, Any]] = []
    children: List[Dict[str, Any]] = []

    if entry.text:
        rich_text.extend(linkify(emojize(entry.text)))
    if entry.link:
        rich_text.append(text_run(entry.link.title, url=entry.link.url))

    if entry.bookmark:
        children.append({
            "type": "bookmark",
            "bookmark": {
                "url": entry.bookmark.url,
                "caption": [text_run(entry.bookmark.caption or "")],
            },
        })
    if entry.embed:
        children.append({"type": "embed", "embed": {"url": entry.embed}})
    if entry.video:
        children.append({"type": "video", "video": {"type": "external", "external": {"url": entry.video}}})

    return {
        "object": "block",
        "type": "bulleted_list_item",
        "bulleted_list_item": {"rich_text": rich_text, "children": children},
    }
