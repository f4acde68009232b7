# journal_bridge/logic/aggregation.py
"""
Aggregation of one journal day of Toggl time entries.
Groups entries by resolved project name, totals them and computes the
overall time span of the day.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from journal_bridge.core.utils import JST, parse_instant
from journal_bridge.models import DailyTogglSummary, EntryLine, ProjectSummary, TimeEntry

log = logging.getLogger(__name__)

NO_PROJECT = "No Project"
UNKNOWN_PROJECT = "Unknown"
SENTINEL_PROJECT_NAMES = frozenset({NO_PROJECT, UNKNOWN_PROJECT})
NO_DESCRIPTION = "(no description)"


def resolve_project_name(project_id: Optional[int], project_map: Mapping[int, str]) -> str:
    if project_id is None:
        return NO_PROJECT
    return project_map.get(project_id, UNKNOWN_PROJECT)


def summarize_by_project(entries: Sequence[TimeEntry], project_map: Mapping[int, str]) -> List[ProjectSummary]:
    """
    Buckets finished entries by resolved project name.

    Running entries (negative duration) are skipped. Buckets keep the order in
    which their project name was first seen, entries keep encounter order.
    """
    summaries: Dict[str, ProjectSummary] = {}

    for entry in entries:
        if entry.is_running:
            continue

        project_name = resolve_project_name(entry.project_id, project_map)
        summary = summaries.get(project_name)
        if summary is None:
            summary = summaries[project_name] = ProjectSummary(project_name=project_name)

        summary.total_seconds += entry.duration
        summary.entries.append(EntryLine(
            description=entry.description or NO_DESCRIPTION,
            seconds=entry.duration,
            start=entry.start,
            stop=entry.stop,
        ))

    return list(summaries.values())


def compute_time_span(entries: Sequence[TimeEntry]) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Earliest start and latest stop over finished entries. Running entries do not count."""
    finished = [entry for entry in entries if not entry.is_running]
    starts = [entry.start for entry in finished]
    stops = [entry.stop for entry in finished if entry.stop is not None]
    return (min(starts) if starts else None, max(stops) if stops else None)


def aggregate_entries(entries: Sequence[TimeEntry], project_map: Mapping[int, str]) -> DailyTogglSummary:
    projects = summarize_by_project(entries, project_map)
    range_start, range_end = compute_time_span(entries)
    total_seconds = sum(summary.total_seconds for summary in projects)
    log.debug(f"Aggregated {len(entries)} entries into {len(projects)} projects ({total_seconds}s)")
    return DailyTogglSummary(
        projects=projects,
        total_seconds=total_seconds,
        range_start=range_start,
        range_end=range_end,
    )


def merge_descriptions(entries: Sequence[EntryLine]) -> List[Tuple[str, int]]:
    """Sums seconds of entries with identical description, in first-seen order."""
    merged: Dict[str, int] = {}
    for entry in entries:
        merged[entry.description] = merged.get(entry.description, 0) + entry.seconds
    return list(merged.items())


def format_duration(seconds: int) -> str:
    """3725 -> '1h 2m', 59 -> '0m'."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_time(instant: Union[datetime, str], tz: timezone = JST) -> str:
    """Wall-clock 'HH:MM' of an instant in the journal timezone."""
    local = parse_instant(instant).astimezone(tz)
    return f"{local.hour:02d}:{local.minute:02d}"


def format_time_range(summary: DailyTogglSummary, tz: timezone = JST) -> str:
    """' HH:MM-HH:MM', or '' when either bound is unknown."""
    if summary.range_start is None or summary.range_end is None:
        return ""
    return f" {format_time(summary.range_start, tz)}-{format_time(summary.range_end, tz)}"
