"""Incremental scan control: first-run lookback window vs. delta since the watermark."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from jobalert.dates import parse_posted_at, utcnow
from jobalert.log import get_logger
from jobalert.models import JobPosting, PostedAt, RunMetadata, ScanMode

log = get_logger(__name__)


@dataclass(frozen=True)
class ScanPlan:
    mode: ScanMode
    window_days: int
    watermark: datetime | None = None

    @property
    def is_incremental(self) -> bool:
        return self.mode is ScanMode.INCREMENTAL


def plan_scan(metadata: RunMetadata | None, window_days: int) -> ScanPlan:
    if metadata is None or metadata.last_run_at is None:
        log.info("No previous run found: first run, scanning past %d days", window_days)
        return ScanPlan(ScanMode.FIRST_RUN, window_days)
    log.info("Incremental scan since %s", metadata.last_run_at.isoformat())
    return ScanPlan(ScanMode.INCREMENTAL, window_days, metadata.last_run_at)


def is_within_window(posted_at: PostedAt, days: int, now: datetime | None = None) -> bool:
    """Undated or unparseable postings are kept."""
    posted = parse_posted_at(posted_at)
    if posted is None:
        return True
    age_days = ((now or utcnow()) - posted).total_seconds() / 86400.0
    return 0 <= age_days <= days


def is_newer_than(posted_at: PostedAt, watermark: datetime | None) -> bool:
    """Strictly after the watermark; undated postings are kept."""
    if watermark is None:
        return True
    posted = parse_posted_at(posted_at)
    mark = parse_posted_at(watermark)
    if posted is None or mark is None:
        return True
    return posted > mark


def select_jobs(
    jobs: list[JobPosting], plan: ScanPlan, now: datetime | None = None
) -> list[JobPosting]:
    if plan.is_incremental:
        kept = [j for j in jobs if is_newer_than(j.posted_at, plan.watermark)]
        log.info("Incremental scan: %d of %d jobs are new", len(kept), len(jobs))
    else:
        kept = [j for j in jobs if is_within_window(j.posted_at, plan.window_days, now)]
        log.info("First-run window: %d of %d jobs within %d days", len(kept), len(jobs), plan.window_days)
    return kept


def apply_scan_cap(jobs: list[JobPosting], limit: int) -> tuple[list[JobPosting], int]:
    """Truncate to ``limit``; returns (kept, dropped_count)."""
    if len(jobs) <= limit:
        return jobs, 0
    dropped = len(jobs) - limit
    log.warning("Scan limit %d reached: dropping %d job(s)", limit, dropped)
    return jobs[:limit], dropped
