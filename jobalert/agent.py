"""
Job alert run.

Runs: fetch (all sources) → scan window → cap → dedup → filter → score →
alert in rank order → mark processed → summary → advance watermark.
"""
from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime

from jobalert.config import ConfigError, Settings
from jobalert.dates import utcnow
from jobalert.dedup import Deduplicator, Verdict
from jobalert.filters import filter_job
from jobalert.log import get_logger
from jobalert.models import JobPosting, RunStats, ScoredJob
from jobalert.report import format_job_alert, format_no_jobs, format_run_started, format_run_summary
from jobalert.rules import RuleSet, load_rules
from jobalert.scan import apply_scan_cap, plan_scan, select_jobs
from jobalert.scorer import rank, score_job
from jobalert.sources import JobSource, get_sources
from jobalert.tables import open_tables
from jobalert.telegram import TelegramNotifier
from jobalert.tracker import JobTracker

log = get_logger(__name__)


def _fetch_source(source: JobSource) -> list[JobPosting]:
    """One source's jobs; any failure counts as zero jobs."""
    try:
        jobs = source.fetch()
        log.info("[%s] returned %d jobs", source.name, len(jobs))
        return jobs
    except Exception as exc:
        log.warning("[%s] FAILED: %s", source.name, exc)
        return []


def fetch_all(sources: list[JobSource]) -> list[JobPosting]:
    if not sources:
        return []
    log.info("Fetching from %d source(s) in parallel...", len(sources))
    results: dict[int, list[JobPosting]] = {}
    with ThreadPoolExecutor(max_workers=len(sources)) as pool:
        futures = {pool.submit(_fetch_source, src): i for i, src in enumerate(sources)}
        for future in as_completed(futures):
            results[futures[future]] = future.result()
    # Source order, so runs are reproducible.
    jobs = [job for i in sorted(results) for job in results[i]]
    log.info("Total jobs fetched from all sources: %d", len(jobs))
    return jobs


def run(
    settings: Settings,
    *,
    sources: list[JobSource] | None = None,
    tracker: JobTracker | None = None,
    notifier: TelegramNotifier | None = None,
    rules: RuleSet | None = None,
    now: datetime | None = None,
) -> RunStats:
    """One scheduled invocation. Raises ConfigError / StoreError on fatal setup problems."""
    started = time.monotonic()
    settings.require()

    if rules is None:
        try:
            rules = load_rules(settings.rules_path)
        except (OSError, ValueError) as exc:
            raise ConfigError(str(exc)) from exc
    notifier = notifier or TelegramNotifier(settings.bot_token, settings.chat_id)
    sources = sources if sources is not None else get_sources(settings.env)

    if tracker is not None:
        return _scan(settings, tracker, notifier, sources, rules, now, started)
    tracker = JobTracker(*open_tables(settings.storage_connection))
    try:
        return _scan(settings, tracker, notifier, sources, rules, now, started)
    finally:
        tracker.close()


def _scan(
    settings: Settings,
    tracker: JobTracker,
    notifier: TelegramNotifier,
    sources: list[JobSource],
    rules: RuleSet,
    now: datetime | None,
    started: float,
) -> RunStats:
    plan = plan_scan(tracker.get_last_run(), settings.window_days)
    stats = RunStats(scan_mode=plan.mode)

    notifier.send(format_run_started(plan, len(sources)))

    # 1. Fetch and bound; the next watermark is the moment fetching began
    watermark = now or utcnow()
    fetched = fetch_all(sources)
    stats.fetched = len(fetched)
    candidates = select_jobs(fetched, plan, watermark)
    candidates, stats.capped = apply_scan_cap(candidates, settings.scan_limit)

    # 2. Dedup, filter, score
    dedup = Deduplicator(tracker)
    scored: list[ScoredJob] = []
    for job in candidates:
        stable_id, verdict = dedup.check(job)
        if verdict is not Verdict.NEW:
            stats.duplicates_skipped += 1
            continue
        stats.new += 1
        result = filter_job(job, rules)
        if not result.matched:
            stats.filtered_out += 1
            log.debug("Rejected %r at %s: %s", job.title, result.stage, result.reason)
            continue
        scored.append(
            ScoredJob(
                job=job,
                stable_id=stable_id,
                matched_keyword=result.matched_keyword,
                score=score_job(job, rules, watermark),
            )
        )
    stats.matched = len(scored)
    log.info(
        "Processed %d candidates: new=%d, duplicates=%d, matched=%d",
        len(candidates), stats.new, stats.duplicates_skipped, stats.matched,
    )

    # 3. Alerts, best first; only delivered jobs are recorded
    ranked = rank(scored)
    if len(ranked) > settings.max_alerts:
        log.info("Alert limit %d reached - %d match(es) deferred", settings.max_alerts, len(ranked) - settings.max_alerts)
    for s in ranked[: settings.max_alerts]:
        outcome = notifier.send(format_job_alert(s), preview=True)
        if not outcome.ok:
            stats.send_failures += 1
            log.error("Alert not sent for %r: %s", s.job.title, outcome.error)
            continue
        stats.sent += 1
        log.info("Alert sent: %s @ %s (score %d, %s)", s.job.title, s.job.company, s.score, s.matched_keyword)
        dedup.mark_processed(s)

    # 4. Summary
    if stats.matched:
        notifier.send(format_run_summary(stats))
    else:
        notifier.send(format_no_jobs(stats, plan))

    stats.execution_time_seconds = time.monotonic() - started
    tracker.update_metadata(stats, watermark)

    log.info(
        "Run complete: fetched=%d, new=%d, matched=%d, sent=%d, failed=%d (%.1fs)",
        stats.fetched, stats.new, stats.matched, stats.sent,
        stats.send_failures, stats.execution_time_seconds,
    )
    return stats
