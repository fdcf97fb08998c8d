"""Build the Telegram messages for a run: start, per-job alert, summary."""
from __future__ import annotations

import re
from html import escape

from jobalert.models import JobPosting, RunStats, ScoredJob
from jobalert.scan import ScanPlan
from jobalert.scorer import relevance_label

ENTRY_LEVEL_LABEL = "Entry Level / Fresher (0-2 years)"

_ENTRY_RE = re.compile(
    r"intern|internship|fresher|graduate|entry.?level|0.?1.?year|0.?year|1.?year|1.?2.?years?|0.?2.?years?"
)
_YEARS_RE = re.compile(r"(\d+)\+?\s*years?")


def experience_label(job: JobPosting) -> str:
    text = job.text.lower()
    if _ENTRY_RE.search(text):
        return ENTRY_LEVEL_LABEL
    m = _YEARS_RE.search(text)
    if m:
        years = int(m.group(1))
        return ENTRY_LEVEL_LABEL if years <= 2 else f"{years}+ years"
    return "Not specified"


def format_run_started(plan: ScanPlan, source_count: int) -> str:
    if plan.is_incremental:
        mode = "🔄 Incremental scan (since last run)"
    else:
        mode = f"⏰ Scanning past {plan.window_days} days"
    return (
        "🔍 <b>Job Search Started</b>\n\n"
        f"{mode}\n"
        "🎯 Azure/Cloud/Security roles (0-2 years)\n"
        "📍 India locations only\n\n"
        f"⏳ Searching {source_count} sources..."
    )


def format_job_alert(scored: ScoredJob) -> str:
    job = scored.job
    return (
        f"🔥 <b>{escape(job.title or 'Untitled Position')}</b>\n\n"
        f"🏢 {escape(job.company or 'N/A')}\n"
        f"📍 {escape(job.location or 'Remote')}\n"
        f"💼 {escape(job.job_type or 'Full-time')} | {experience_label(job)}\n"
        f"💰 {escape(job.salary or 'Not disclosed')}\n\n"
        f"{relevance_label(scored.score)}\n"
        f"🔗 {escape(job.url or 'URL not available')}"
    )


def format_run_summary(stats: RunStats) -> str:
    lines = [
        "✅ <b>Search Complete</b>",
        "",
        f"📊 Found: {stats.matched} jobs",
        f"📤 Sent: {stats.sent} alerts",
        f"⏭️ Skipped: {stats.duplicates_skipped} duplicates",
    ]
    if stats.send_failures:
        lines.append(f"⚠️ Failed: {stats.send_failures} alerts (will retry next run)")
    return "\n".join(lines)


def format_no_jobs(stats: RunStats, plan: ScanPlan) -> str:
    if plan.is_incremental:
        scan_info = "🔄 Scanned new jobs posted since last run"
    else:
        scan_info = f"📊 Scanned {stats.fetched} jobs"
    return (
        "📭 <b>No New Jobs</b>\n\n"
        f"{scan_info}\n"
        f"⏭️ Skipped {stats.duplicates_skipped} duplicates"
    )
