import pytest
from datetime import datetime, timezone

from journal_bridge.logic.aggregation import (
    NO_DESCRIPTION,
    NO_PROJECT,
    UNKNOWN_PROJECT,
    aggregate_entries,
    compute_time_span,
    format_duration,
    format_time,
    format_time_range,
    merge_descriptions,
    resolve_project_name,
    summarize_by_project,
)
from journal_bridge.models import TimeEntry

def make_entry(entry_id, project_id, description, duration, start, stop, workspace_id=1):
    return TimeEntry(
        id=entry_id,
        description=description,
        start=start,
        stop=stop,
        duration=duration,
        project_id=project_id,
        workspace_id=workspace_id,
    )

@pytest.fixture
def day_entries():
    return [
        make_entry(1, 1, "Build", 1800, "2026-10-19T01:00:00Z", "2026-10-19T01:30:00Z"),
        make_entry(2, None, "Email", 600, "2026-10-19T02:00:00Z", "2026-10-19T02:10:00Z"),
    ]

@pytest.mark.parametrize("seconds,expected", [
    (0, "0m"),
    (59, "0m"),
    (60, "1m"),
    (3599, "59m"),
    (3600, "1h 0m"),
    (3725, "1h 2m"),
    (36000, "10h 0m"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected

def test_format_time_shifts_to_utc_plus_nine():
    assert format_time("2026-10-19T01:05:00Z") == "10:05"
    assert format_time("2026-10-19T15:30:00+00:00") == "00:30"
    assert format_time(datetime(2026, 10, 19, 0, 0, tzinfo=timezone.utc)) == "09:00"

def test_format_time_is_deterministic():
    assert format_time("2026-10-19T03:07:00Z") == format_time("2026-10-19T03:07:00Z") == "12:07"

def test_resolve_project_name():
    project_map = {1: "Website"}
    assert resolve_project_name(1, project_map) == "Website"
    assert resolve_project_name(None, project_map) == NO_PROJECT
    assert resolve_project_name(42, project_map) == UNKNOWN_PROJECT

def test_end_to_end_scenario(day_entries):
    summary = aggregate_entries(day_entries, {1: "Website"})

    assert [(p.project_name, p.total_seconds) for p in summary.projects] == [
        ("Website", 1800),
        ("No Project", 600),
    ]
    assert summary.total_seconds == 2400
    assert format_duration(summary.total_seconds) == "40m"
    assert format_time_range(summary) == " 10:00-11:10"

def test_running_entries_are_excluded(day_entries):
    running = make_entry(3, 1, "Still going", -1, "2026-10-19T03:00:00Z", None)
    summary = aggregate_entries(day_entries + [running], {1: "Website"})

    website = summary.projects[0]
    assert website.total_seconds == 1800
    assert all(line.description != "Still going" for p in summary.projects for line in p.entries)

def test_totals_match_finished_durations():
    entries = [
        make_entry(1, 1, "a", 100, "2026-10-19T00:00:00Z", "2026-10-19T00:01:40Z"),
        make_entry(2, 2, "b", 250, "2026-10-19T01:00:00Z", "2026-10-19T01:04:10Z"),
        make_entry(3, 1, "c", -1700000000, "2026-10-19T02:00:00Z", None),
        make_entry(4, 3, "d", 0, "2026-10-19T03:00:00Z", "2026-10-19T03:00:00Z"),
        make_entry(5, None, "e", 777, "2026-10-19T04:00:00Z", "2026-10-19T04:12:57Z"),
    ]
    projects = summarize_by_project(entries, {1: "A", 2: "B"})

    expected = sum(entry.duration for entry in entries if entry.duration >= 0)
    assert sum(p.total_seconds for p in projects) == expected
    assert [p.project_name for p in projects] == ["A", "B", UNKNOWN_PROJECT, NO_PROJECT]

def test_entries_keep_encounter_order():
    entries = [
        make_entry(1, 1, "first", 60, "2026-10-19T00:00:00Z", "2026-10-19T00:01:00Z"),
        make_entry(2, 2, "other", 60, "2026-10-19T00:05:00Z", "2026-10-19T00:06:00Z"),
        make_entry(3, 1, "second", 60, "2026-10-19T00:10:00Z", "2026-10-19T00:11:00Z"),
    ]
    projects = summarize_by_project(entries, {1: "A", 2: "B"})
    assert [line.description for line in projects[0].entries] == ["first", "second"]

def test_empty_description_gets_placeholder():
    entries = [make_entry(1, None, "", 120, "2026-10-19T00:00:00Z", "2026-10-19T00:02:00Z")]
    projects = summarize_by_project(entries, {})
    assert projects[0].entries[0].description == NO_DESCRIPTION

def test_aggregation_is_idempotent(day_entries):
    first = aggregate_entries(day_entries, {1: "Website"})
    second = aggregate_entries(day_entries, {1: "Website"})
    assert first.model_dump_json() == second.model_dump_json()

def test_merge_descriptions_sums_identical_text():
    entries = [
        make_entry(1, 1, "Review PR", 600, "2026-10-19T00:00:00Z", "2026-10-19T00:10:00Z"),
        make_entry(2, 1, "Deploy", 300, "2026-10-19T00:20:00Z", "2026-10-19T00:25:00Z"),
        make_entry(3, 1, "Review PR", 900, "2026-10-19T01:00:00Z", "2026-10-19T01:15:00Z"),
        make_entry(4, 1, "review pr", 60, "2026-10-19T02:00:00Z", "2026-10-19T02:01:00Z"),
    ]
    project = summarize_by_project(entries, {1: "A"})[0]
    assert merge_descriptions(project.entries) == [("Review PR", 1500), ("Deploy", 300), ("review pr", 60)]

def test_zero_entries():
    summary = aggregate_entries([], {})
    assert summary.projects == []
    assert summary.total_seconds == 0
    assert format_duration(summary.total_seconds) == "0m"
    assert format_time_range(summary) == ""

def test_time_span_without_any_stop():
    entries = [
        make_entry(1, 1, "a", -1, "2026-10-19T01:00:00Z", None),
        make_entry(2, 1, "b", -1, "2026-10-19T02:00:00Z", None),
    ]
    start, end = compute_time_span(entries)
    assert start is None
    assert end is None
    assert format_time_range(aggregate_entries(entries, {1: "A"})) == ""

def test_time_span_uses_earliest_start_and_latest_stop():
    entries = [
        make_entry(1, 1, "late", 600, "2026-10-19T05:00:00Z", "2026-10-19T05:10:00Z"),
        make_entry(2, 1, "early", 600, "2026-10-19T00:30:00Z", "2026-10-19T00:40:00Z"),
        make_entry(3, 1, "running", -1, "2026-10-19T06:00:00Z", None),
    ]
    start, end = compute_time_span(entries)
    assert start == datetime(2026, 10, 19, 0, 30, tzinfo=timezone.utc)
    assert end == datetime(2026, 10, 19, 5, 10, tzinfo=timezone.utc)

def test_time_span_ignores_running_timer_start():
    entries = [
        make_entry(1, 1, "running", -1, "2026-10-19T00:00:00Z", None),
        make_entry(2, 1, "manual", 1800, "2026-10-19T01:00:00Z", "2026-10-19T01:30:00Z"),
    ]
    start, end = compute_time_span(entries)
    assert start == datetime(2026, 10, 19, 1, 0, tzinfo=timezone.utc)
    assert format_time_range(aggregate_entries(entries, {1: "A"})) == " 10:00-10:30"
