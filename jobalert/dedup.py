"""Stable content ids and two-level duplicate detection (this run, then store)."""
from __future__ import annotations

import hashlib
from enum import Enum

from jobalert.models import JobPosting, ScoredJob
from jobalert.tracker import JobTracker


def compute_id(job: JobPosting) -> str:
    """SHA-256 over url + title + company; identical triples give identical ids."""
    unique = f"{job.url or ''}{job.title or ''}{job.company or ''}"
    return hashlib.sha256(unique.encode("utf-8")).hexdigest()


class Verdict(str, Enum):
    NEW = "new"
    RUN_DUPLICATE = "run_duplicate"
    PROCESSED = "processed"


class Deduplicator:
    """One instance per run; ``seen_this_run`` starts empty every time."""

    def __init__(self, tracker: JobTracker) -> None:
        self._tracker = tracker
        self.seen_this_run: set[str] = set()

    def check(self, job: JobPosting) -> tuple[str, Verdict]:
        stable_id = compute_id(job)
        if stable_id in self.seen_this_run:
            return stable_id, Verdict.RUN_DUPLICATE
        self.seen_this_run.add(stable_id)
        if self._tracker.is_processed(stable_id):
            return stable_id, Verdict.PROCESSED
        return stable_id, Verdict.NEW

    def mark_processed(self, scored: ScoredJob) -> bool:
        """Call only after the alert was delivered."""
        return self._tracker.mark_processed(scored)
