from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
sys.path.insert(0, str(SRC_PATH))

# `argparse` provides a stable CLI interface for long-running polling jobs.
import argparse
import logging
# `time.sleep` is used for simple fixed-interval scheduling between polls.
import time

from indegoatlas.config.loader import load_config
from indegoatlas.ingestion.http_base import HttpClient, SourceUnavailableError
from indegoatlas.ingestion.station_feed import StationFeedClient
from indegoatlas.stations.summary import summarize_stations
from indegoatlas.utils.logging import configure_logging


logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Poll the station-status feed on a fixed interval and log system totals. Stop with Ctrl+C."
    )
    parser.add_argument("--interval-seconds", type=int, default=None, help="Polling interval (default: config).")
    parser.add_argument("--max-iterations", type=int, default=None, help="Stop after N polls.")
    args = parser.parse_args()

    config = load_config()
    configure_logging(config.logging)

    interval_s = max(int(args.interval_seconds or config.stations.poll_interval_s), 1)

    with HttpClient.from_settings(config.http) as http:
        feed = StationFeedClient(http=http, settings=config.stations)
        i = 0
        while True:
            if args.max_iterations is not None and i >= int(args.max_iterations):
                logger.info("Stopping: max iterations reached.")
                break
            i += 1

            try:
                stats = summarize_stations(feed.fetch_stations())
            except SourceUnavailableError as e:
                # A failed poll is skipped; the next tick fetches a fresh snapshot.
                logger.warning("Poll %s failed: %s", i, e)
            else:
                logger.info(
                    "Poll %s: stations=%s active=%s bikes=%s docks=%s/%s electric=%s utilization=%s%%",
                    i,
                    stats.total_stations,
                    stats.active_stations,
                    stats.available_bikes,
                    stats.available_docks,
                    stats.total_docks,
                    stats.electric_bikes,
                    stats.utilization_pct,
                )

            if args.max_iterations is not None and i >= int(args.max_iterations):
                continue
            try:
                time.sleep(interval_s)
            except KeyboardInterrupt:
                logger.info("Stopping: interrupted.")
                break


if __name__ == "__main__":
    main()
