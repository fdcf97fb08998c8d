"""Tests for Telegram message formatting."""

from datetime import datetime, timezone

import pytest

from jobalert.models import JobPosting, RunStats, ScanMode, ScoredJob
from jobalert.report import (
    ENTRY_LEVEL_LABEL,
    experience_label,
    format_job_alert,
    format_no_jobs,
    format_run_started,
    format_run_summary,
)
from jobalert.scan import ScanPlan

FIRST = ScanPlan(ScanMode.FIRST_RUN, 7)
INCREMENTAL = ScanPlan(ScanMode.INCREMENTAL, 30, watermark=datetime(2025, 3, 1, tzinfo=timezone.utc))


def _scored(**kw: object) -> ScoredJob:
    job = JobPosting(**kw)  # type: ignore[arg-type]
    return ScoredJob(job=job, stable_id="x", matched_keyword="Azure", score=105)


class TestExperienceLabel:
    @pytest.mark.parametrize(
        ("description", "label"),
        [
            ("Fresher welcome", ENTRY_LEVEL_LABEL),
            ("0-1 years", ENTRY_LEVEL_LABEL),
            ("needs 5 years", "5+ years"),
            ("nothing here", "Not specified"),
        ],
    )
    def test_labels(self, description: str, label: str) -> None:
        assert experience_label(JobPosting(title="Engineer", description=description)) == label


class TestRunStarted:
    def test_first_run(self) -> None:
        msg = format_run_started(FIRST, 11)
        assert "Scanning past 7 days" in msg
        assert "Searching 11 sources" in msg

    def test_incremental(self) -> None:
        msg = format_run_started(INCREMENTAL, 11)
        assert "Incremental scan" in msg
        assert "past" not in msg


class TestJobAlert:
    def test_fields(self) -> None:
        msg = format_job_alert(
            _scored(
                title="Azure Cloud Engineer - Fresher",
                company="Microsoft",
                location="Bangalore, India",
                job_type="Full-time",
                url="https://example.com/jobs/1",
            )
        )
        assert "<b>Azure Cloud Engineer - Fresher</b>" in msg
        assert "🏢 Microsoft" in msg
        assert "📍 Bangalore, India" in msg
        assert f"Full-time | {ENTRY_LEVEL_LABEL}" in msg
        assert "💰 Not disclosed" in msg
        assert "⭐⭐⭐⭐⭐ Excellent Match" in msg
        assert "🔗 https://example.com/jobs/1" in msg

    def test_defaults(self) -> None:
        msg = format_job_alert(_scored())
        assert "Untitled Position" in msg
        assert "N/A" in msg
        assert "📍 Remote" in msg
        assert "URL not available" in msg

    def test_html_escaped(self) -> None:
        msg = format_job_alert(_scored(title="R&D <Cloud> Engineer", company="A & B"))
        assert "R&amp;D &lt;Cloud&gt; Engineer" in msg
        assert "A &amp; B" in msg
        assert "<Cloud>" not in msg


class TestSummaries:
    def test_summary(self) -> None:
        msg = format_run_summary(RunStats(matched=4, sent=3, duplicates_skipped=9))
        assert "Found: 4 jobs" in msg
        assert "Sent: 3 alerts" in msg
        assert "Skipped: 9 duplicates" in msg
        assert "Failed" not in msg

    def test_summary_with_failures(self) -> None:
        msg = format_run_summary(RunStats(matched=4, sent=3, send_failures=1))
        assert "Failed: 1 alerts" in msg

    def test_no_jobs_first_run(self) -> None:
        msg = format_no_jobs(RunStats(fetched=120, duplicates_skipped=5), FIRST)
        assert "No New Jobs" in msg
        assert "Scanned 120 jobs" in msg
        assert "Skipped 5 duplicates" in msg

    def test_no_jobs_incremental(self) -> None:
        msg = format_no_jobs(RunStats(), INCREMENTAL)
        assert "since last run" in msg
