"""Track alerted jobs and the last-run watermark in the table store."""
from __future__ import annotations

from datetime import datetime

from jobalert.dates import parse_posted_at, utcnow
from jobalert.log import get_logger
from jobalert.models import ProcessedJobRecord, RunMetadata, RunStats, ScanMode, ScoredJob
from jobalert.tables import EntityExists, EntityNotFound, TableStore

log = get_logger(__name__)

JOBS_PARTITION = "jobs"
META_PARTITION = "meta"
META_ROW = "lastRun"


class JobTracker:
    """Processed-jobs and run-metadata bookkeeping.

    Reads fail open (an unreadable record counts as absent) and writes are
    logged and swallowed; only opening the store is fatal.
    """

    def __init__(self, jobs_table: TableStore, meta_table: TableStore) -> None:
        self.jobs = jobs_table
        self.meta = meta_table

    def close(self) -> None:
        self.jobs.close()
        self.meta.close()

    def is_processed(self, stable_id: str) -> bool:
        try:
            self.jobs.get_entity(JOBS_PARTITION, stable_id)
            return True
        except EntityNotFound:
            return False
        except Exception as exc:
            log.warning("Error checking job %s…: %s", stable_id[:8], exc)
            return False

    def get_record(self, stable_id: str) -> ProcessedJobRecord | None:
        try:
            entity = self.jobs.get_entity(JOBS_PARTITION, stable_id)
        except EntityNotFound:
            return None
        return ProcessedJobRecord(
            stable_id=stable_id,
            title=entity.get("title", ""),
            company=entity.get("company", ""),
            processed_at=parse_posted_at(entity.get("processedAt")) or utcnow(),
            url=entity.get("url", ""),
        )

    def mark_processed(self, scored: ScoredJob, now: datetime | None = None) -> bool:
        entity = {
            "PartitionKey": JOBS_PARTITION,
            "RowKey": scored.stable_id,
            "title": scored.job.title,
            "company": scored.job.company or "N/A",
            "processedAt": (now or utcnow()).isoformat(),
            "url": scored.job.url or "",
        }
        try:
            self.jobs.create_entity(entity)
        except EntityExists:
            log.debug("Already recorded: %s…", scored.stable_id[:8])
            return True
        except Exception as exc:
            log.warning("Error marking job %s… as processed: %s", scored.stable_id[:8], exc)
            return False
        log.debug("Marked as processed: %s…", scored.stable_id[:8])
        return True

    def get_last_run(self) -> RunMetadata | None:
        try:
            entity = self.meta.get_entity(META_PARTITION, META_ROW)
        except EntityNotFound:
            log.info("No previous run metadata found (first run)")
            return None
        except Exception as exc:
            log.warning("Error reading run metadata: %s", exc)
            return None

        last_run_at = parse_posted_at(entity.get("lastRunAt"))
        if last_run_at is None:
            log.warning("Run metadata has no usable lastRunAt: treating as first run")
            return None
        try:
            mode = ScanMode(entity.get("scanMode", ScanMode.INCREMENTAL.value))
        except ValueError:
            mode = ScanMode.INCREMENTAL
        try:
            return RunMetadata(
                last_run_at=last_run_at,
                scan_mode=mode,
                total_fetched=int(entity.get("totalFetched", 0)),
                total_new=int(entity.get("totalNew", 0)),
                total_matched=int(entity.get("totalMatched", 0)),
                duplicates_skipped=int(entity.get("duplicatesSkipped", 0)),
                total_sent=int(entity.get("totalSent", 0)),
                execution_time_seconds=float(entity.get("executionTimeSeconds", 0.0)),
            )
        except (TypeError, ValueError) as exc:
            log.warning("Run metadata is malformed (%s): treating as first run", exc)
            return None

    def update_metadata(self, stats: RunStats, now: datetime | None = None) -> bool:
        """Persist stats and advance the watermark to ``now``."""
        last_run_at = (now or utcnow()).isoformat()
        entity = {
            "PartitionKey": META_PARTITION,
            "RowKey": META_ROW,
            "lastRunAt": last_run_at,
            "scanMode": stats.scan_mode.value,
            "totalFetched": stats.fetched,
            "totalNew": stats.new,
            "totalMatched": stats.matched,
            "duplicatesSkipped": stats.duplicates_skipped,
            "totalSent": stats.sent,
            "executionTimeSeconds": round(stats.execution_time_seconds, 2),
        }
        try:
            self.meta.upsert_entity(entity)
        except Exception as exc:
            log.warning("Error updating run metadata: %s", exc)
            return False
        log.info("Metadata updated (lastRunAt: %s)", last_run_at)
        return True
