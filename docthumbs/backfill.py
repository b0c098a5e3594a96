"""Schedule thumbnails for documents that do not have one."""

import argparse
from datetime import timedelta

from docthumbs.application import build_application
from docthumbs.config.settings import Settings
from docthumbs.database.connection import Database
from docthumbs.logging.logger import Log


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--limit",
        type=int,
        default=100,
        help="maximum number of documents to schedule (default: 100)",
    )
    parser.add_argument(
        "--stale-minutes",
        type=int,
        default=15,
        help="also reschedule renders pending for longer than this (default: 15)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    database = Database(settings)
    database.open()

    try:
        app = build_application(settings, database)
        try:
            scheduled = app.coordinator.backfill_missing_thumbnails(
                args.limit, timedelta(minutes=args.stale_minutes)
            )
        finally:
            # Thread-scheduled renders finish before the pool closes.
            app.close()
    finally:
        database.close()

    Log.info("Backfill finished", scheduled=scheduled)


if __name__ == "__main__":
    main()
