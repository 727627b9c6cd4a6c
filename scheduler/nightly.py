"""Nightly scheduler — recomputes load, readiness and deload status per athlete.

Reads one JSON file per athlete from the data directory and writes a JSON
summary per athlete to the output directory.

Usage:
    python -m scheduler.nightly --once      # single run (for cron)
    python -m scheduler.nightly --daemon    # APScheduler loop
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Any

from adaptive_engine.config import DEFAULT_CONFIG, EngineConfig
from adaptive_engine.math.deload import evaluate_deload_need
from adaptive_engine.math.training_load import calculate_load_history, compute_load_metrics
from adaptive_engine.repository import InMemoryStore
from adaptive_engine.serialization.records import (
    assessment_from_record,
    baseline_from_record,
    daily_loads_from_records,
    deload_to_record,
    load_history_to_records,
    load_metrics_to_record,
    parse_date,
    readiness_result_to_record,
)
from adaptive_engine.services import ReadinessService

from scheduler.config import DATA_DIR, NIGHTLY_HOUR, NIGHTLY_MINUTE, OUTPUT_DIR

logger = logging.getLogger(__name__)


def summarize_athlete(
    record: dict[str, Any],
    today: date,
    config: EngineConfig = DEFAULT_CONFIG,
) -> dict[str, Any]:
    """Compute the nightly summary for one athlete record.

    Expected keys: ``athlete_id``, ``daily_loads``, and optionally
    ``baseline``, ``readiness`` (list of assessments), ``muscles_over_mrv``
    and ``days_since_last_deload``.
    """
    athlete_id = record["athlete_id"]
    store = InMemoryStore()
    store.add_daily_loads(athlete_id, daily_loads_from_records(record.get("daily_loads", [])))
    baseline = baseline_from_record(record.get("baseline"))
    if baseline is not None:
        store.set_baseline(athlete_id, baseline)

    service = ReadinessService(store, store, config)
    latest = None
    for item in sorted(record.get("readiness", []), key=lambda r: parse_date(r["date"])):
        assessment = assessment_from_record(athlete_id, item)
        if assessment.date <= today:
            latest = service.submit(assessment)

    lookback = today - timedelta(days=2 * config.ctl_window_days)
    samples = store.get_daily_loads(athlete_id, lookback, today)
    metrics = compute_load_metrics(samples, today, config)
    history = calculate_load_history(
        samples, today - timedelta(days=config.ctl_window_days - 1), today, config
    )

    deload = evaluate_deload_need(
        tsb=metrics.tsb,
        muscles_over_mrv=record.get("muscles_over_mrv", ()),
        recent_recovery_scores=store.readiness_scores(athlete_id, today),
        days_since_last_deload=record.get("days_since_last_deload"),
        thresholds=config.deload,
    )

    return {
        "athlete_id": athlete_id,
        "date": today.isoformat(),
        "load": load_metrics_to_record(metrics),
        "load_history": load_history_to_records(history),
        "readiness": (
            readiness_result_to_record(latest.result)
            if latest is not None and latest.result is not None
            else None
        ),
        "deload": deload_to_record(deload),
    }


def run_batch(data_dir: Path, output_dir: Path, today: date) -> dict[str, bool]:
    """Summarize every ``*.json`` athlete file in ``data_dir``.

    Returns a mapping of file stem to success. A failing athlete is logged
    and does not stop the batch.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    results: dict[str, bool] = {}
    for path in sorted(data_dir.glob("*.json")):
        try:
            with open(path) as f:
                record = json.load(f)
            summary = summarize_athlete(record, today)
            with open(output_dir / f"{path.stem}.json", "w") as f:
                json.dump(summary, f, indent=2)
            results[path.stem] = True
            logger.info(
                "Summarized %s: CTL %.1f, ATL %.1f, TSB %.1f",
                summary["athlete_id"],
                summary["load"]["ctl"],
                summary["load"]["atl"],
                summary["load"]["tsb"],
            )
        except Exception as exc:
            logger.error("Failed to summarize %s: %s", path.name, exc)
            results[path.stem] = False
    return results


def nightly_job() -> None:
    """Execute one nightly cycle over the configured data directory."""
    logger.info("Starting nightly job")
    if not DATA_DIR.is_dir():
        logger.error("Data directory not found at %s", DATA_DIR)
        return
    results = run_batch(DATA_DIR, OUTPUT_DIR, date.today())
    failed = [name for name, ok in results.items() if not ok]
    logger.info(
        "Nightly job complete: %d athletes, %d failed",
        len(results),
        len(failed),
    )


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = argparse.ArgumentParser(description="Adaptive engine nightly scheduler")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--once", action="store_true", help="Run once and exit")
    group.add_argument("--daemon", action="store_true", help="Run as APScheduler daemon")
    args = parser.parse_args()

    if args.once:
        nightly_job()
    else:
        from apscheduler.schedulers.blocking import BlockingScheduler

        scheduler = BlockingScheduler()
        scheduler.add_job(
            nightly_job,
            "cron",
            hour=NIGHTLY_HOUR,
            minute=NIGHTLY_MINUTE,
            id="nightly_job",
        )
        logger.info(
            "Scheduler started - nightly job at %02d:%02d",
            NIGHTLY_HOUR,
            NIGHTLY_MINUTE,
        )
        try:
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Scheduler stopped")


if __name__ == "__main__":
    main()
