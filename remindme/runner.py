import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .config import Settings
from .errors import RemindMeError
from .messaging.ntfy import NtfyNotifier
from .payments.calendar import Calendar
from .payments.ingest import ingest_sheet
from .payments.models import Payment
from .payments.report import REPORT_TITLE, build_report
from .sheets.client import GoogleSheetsClient, SheetError
from .sheets.models import SheetKind

logger = logging.getLogger(__name__)


@dataclass
class CollectedPayments:
    """Pending payments of one run, grouped by the kind of sheet they came from"""

    payments: list[Payment] = field(default_factory=list)
    monthly: list[Payment] = field(default_factory=list)
    failed_sheets: list[str] = field(default_factory=list)


class PaymentReporter:
    """Builds the payment report from the configured sheets and sends it"""

    def __init__(
        self,
        settings: Settings,
        sheets_client: GoogleSheetsClient,
        notifier: NtfyNotifier,
        calendar: Calendar,
    ):
        self.settings = settings
        self.sheets_client = sheets_client
        self.notifier = notifier
        self.calendar = calendar

    def collect_payments(self, now: datetime) -> CollectedPayments:
        """Read every configured sheet in order

        Payments from month-column sheets are kept apart from the others.
        Sheets that could not be read are listed by name, unless
        `on_sheet_error: abort` is set, in which case the first failure is
        raised instead.
        """
        collected = CollectedPayments()
        for descriptor in self.settings.sheets:
            try:
                rows = self.sheets_client.get_rows(descriptor.spreadsheet_id, descriptor.sheet_name)
                sheet_payments = ingest_sheet(rows, descriptor, self.calendar, now)
            except (RemindMeError, SheetError) as e:
                if self.settings.on_sheet_error == "abort":
                    raise
                logger.error(f"Skipping sheet {descriptor.sheet_name}: {e}")
                collected.failed_sheets.append(descriptor.sheet_name)
                continue

            logger.info(f"[{descriptor.sheet_name}] {len(sheet_payments)} pending payments")
            if descriptor.kind == SheetKind.MONTHLY:
                collected.monthly.extend(sheet_payments)
            else:
                collected.payments.extend(sheet_payments)
        return collected

    def build_report(self, now: Optional[datetime] = None) -> str:
        now = now or self.calendar.now()
        collected = self.collect_payments(now)
        return build_report(
            collected.payments,
            now,
            self.calendar,
            window_days=self.settings.coming_up_days,
            placeholders=self.settings.placeholders,
            failed_sheets=collected.failed_sheets,
            monthly=collected.monthly,
        )

    def notify(self, report: str) -> None:
        self.notifier.send(self.settings.ntfy_topic, REPORT_TITLE, report)

    def run(self, now: Optional[datetime] = None, echo: bool = False) -> str:
        """Build and send one report

        When building fails, an error notification is sent in its place and
        the original error is raised.
        """
        try:
            report = self.build_report(now)
        except (RemindMeError, SheetError) as e:
            logger.error(f"Failed to build payment report: {e}")
            try:
                self.notify(f"❌ Payment report failed: {e}")
            except RemindMeError:
                logger.exception("Failed to send error notification")
            raise

        if echo:
            print(report)
        self.notify(report)
        return report
