"""Data models for postings, filter verdicts, and run bookkeeping."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Union

PostedAt = Union[str, int, float, None]


class ScanMode(str, Enum):
    FIRST_RUN = "first_run"
    INCREMENTAL = "incremental"


@dataclass
class JobPosting:
    """Canonical posting shape produced by every source parser.

    Defaults are applied once, by the parsers; downstream stages treat empty
    strings as "not matching" and never re-derive them.
    """

    title: str = ""
    company: str = ""
    location: str = ""
    description: str = ""
    url: str = ""
    posted_at: PostedAt = None
    job_type: str = ""
    salary: str | None = None
    source: str = ""
    tags: list[str] = field(default_factory=list)
    source_id: str = ""
    # No structured location: validate against title + description instead.
    location_in_text: bool = False

    @property
    def text(self) -> str:
        return f"{self.title} {self.description}"


@dataclass(frozen=True)
class FilterResult:
    matched: bool
    reason: str | None = None
    matched_keyword: str | None = None
    stage: str | None = None

    @classmethod
    def rejected(cls, stage: str, reason: str) -> FilterResult:
        return cls(matched=False, reason=reason, stage=stage)

    @classmethod
    def accepted(cls, keyword: str | None) -> FilterResult:
        return cls(matched=True, matched_keyword=keyword)


@dataclass
class ScoredJob:
    job: JobPosting
    stable_id: str
    matched_keyword: str | None
    score: int


@dataclass
class RunStats:
    scan_mode: ScanMode = ScanMode.FIRST_RUN
    fetched: int = 0
    capped: int = 0
    new: int = 0
    duplicates_skipped: int = 0
    filtered_out: int = 0
    matched: int = 0
    sent: int = 0
    send_failures: int = 0
    execution_time_seconds: float = 0.0


@dataclass
class RunMetadata:
    last_run_at: datetime
    scan_mode: ScanMode = ScanMode.INCREMENTAL
    total_fetched: int = 0
    total_new: int = 0
    total_matched: int = 0
    duplicates_skipped: int = 0
    total_sent: int = 0
    execution_time_seconds: float = 0.0


@dataclass
class ProcessedJobRecord:
    stable_id: str
    title: str
    company: str
    processed_at: datetime
    url: str = ""


@dataclass(frozen=True)
class SendResult:
    ok: bool
    error: str | None = None
