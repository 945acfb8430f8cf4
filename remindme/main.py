import argparse
import logging
import sys
from typing import Optional, Sequence

from remindme.config import load_settings
from remindme.errors import RemindMeError
from remindme.logging_config.logging_config import setup_logging
from remindme.messaging.ntfy import NtfyNotifier
from remindme.payments.calendar import Calendar
from remindme.runner import PaymentReporter
from remindme.scheduling.schedule import Scheduler, parse_schedule
from remindme.sheets.client import GoogleSheetsClient, SheetError


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="remindme", description="Send a daily report of pending payments")
    parser.add_argument("config", nargs="?", help="Path to the YAML config file (default: $REMINDME_CONFIG)")
    parser.add_argument("-p", "--print", dest="echo", action="store_true", help="Also print the report to stdout")
    parser.add_argument("--once", action="store_true", help="Send a single report and exit instead of scheduling")
    return parser.parse_args(argv)


# ruff: noqa: D103
def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Starting payment reminder")

    try:
        settings = load_settings(args.config)
        calendar = Calendar.from_name(settings.timezone)
        schedule = parse_schedule(settings.schedule)
        sheets_client = GoogleSheetsClient(
            credentials_info=settings.credentials,
            credentials_path=settings.credentials_path,
        )
    except (RemindMeError, SheetError, ValueError) as e:
        logger.critical(f"Unable to start: {e}")
        return 1

    reporter = PaymentReporter(
        settings=settings,
        sheets_client=sheets_client,
        notifier=NtfyNotifier(base_url=settings.ntfy_url, timeout=settings.notification_timeout),
        calendar=calendar,
    )

    if args.once:
        try:
            reporter.run(echo=args.echo)
        except (RemindMeError, SheetError):
            logger.exception("Failed to send payment report")
            return 1
        return 0

    logger.info(f"Scheduling payment reports with {settings.schedule!r} in {calendar.name}")
    Scheduler(schedule, lambda: reporter.run(echo=args.echo), clock=calendar.now).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
