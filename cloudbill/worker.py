import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from arq import cron

from cloudbill.core.database import SessionLocal
from cloudbill.repositories.resource_repository import ResourceRepository
from cloudbill.repositories.usage_record_repository import UsageRecordRepository
from cloudbill.services.invoice_generator import InvoiceGenerationService
from cloudbill.services.usage_tracker import UsageTrackingService
from cloudbill.tasks import redis_settings

logger = logging.getLogger(__name__)


def previous_month_period(now: datetime) -> tuple[datetime, datetime]:
    """First and last instant of the calendar month before ``now``."""
    this_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    period_end = this_month - timedelta(microseconds=1)
    period_start = period_end.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return period_start, period_end


async def track_usage_task(ctx: dict[str, Any], account_id: str | None = None) -> int:
    """Background task: sample active resources into usage records.

    Without an account id every account owning resources is sampled. Runs
    hourly; a second run inside the same hour records the usage twice.
    """
    db = SessionLocal()
    try:
        if account_id:
            account_ids = [account_id]
        else:
            account_ids = ResourceRepository(db).get_account_ids()

        service = UsageTrackingService(db)
        count = 0
        for acc in account_ids:
            report = service.track_all_active_resources(acc)
            count += report.records_created
            for error in report.errors:
                logger.warning("Usage tracking error for account %s: %s", acc, error)

        if count > 0:
            logger.info("Tracked %d usage records across %d accounts", count, len(account_ids))
        return count
    finally:
        db.close()


async def generate_invoice_task(
    ctx: dict[str, Any], account_id: str, period_start: str, period_end: str
) -> str | None:
    """Background task: generate one invoice. Returns the invoice number."""
    db = SessionLocal()
    try:
        service = InvoiceGenerationService(db)
        result = service.generate_invoice(
            account_id=account_id,
            period_start=datetime.fromisoformat(period_start),
            period_end=datetime.fromisoformat(period_end),
        )
        if not result.success or result.invoice is None:
            logger.warning("No invoice generated for account %s: %s", account_id, result.error)
            return None
        return str(result.invoice.invoice_number)
    finally:
        db.close()


async def generate_monthly_invoices_task(ctx: dict[str, Any]) -> int:
    """Background task: invoice last calendar month's unbilled usage.

    Runs on the 1st of each month. Accounts are processed one at a time so
    no two invoices for the same account are generated concurrently.
    """
    db = SessionLocal()
    try:
        period_start, period_end = previous_month_period(datetime.now(UTC))
        account_ids = UsageRecordRepository(db).get_account_ids_with_unbilled_usage(
            period_start, period_end
        )

        service = InvoiceGenerationService(db)
        count = 0
        for account_id in account_ids:
            result = service.generate_invoice(account_id, period_start, period_end)
            if result.success:
                count += 1
            else:
                logger.warning(
                    "Monthly invoice failed for account %s: %s", account_id, result.error
                )

        if count > 0:
            logger.info(
                "Generated %d invoices for %s", count, period_start.strftime("%Y-%m")
            )
        return count
    finally:
        db.close()


async def mark_overdue_invoices_task(ctx: dict[str, Any]) -> int:
    """Background task: move issued invoices past their due date to overdue.

    Runs daily.
    """
    db = SessionLocal()
    try:
        count = InvoiceGenerationService(db).mark_past_due_invoices_overdue()
        if count > 0:
            logger.info("Marked %d invoices as overdue", count)
        return count
    finally:
        db.close()


class WorkerSettings:
    functions = [
        track_usage_task,
        generate_invoice_task,
        generate_monthly_invoices_task,
        mark_overdue_invoices_task,
    ]
    cron_jobs = [
        cron(track_usage_task, minute={0}),  # hourly
        cron(generate_monthly_invoices_task, day={1}, hour={1}, minute={0}),  # 1st, 01:00 UTC
        cron(mark_overdue_invoices_task, hour={0}, minute={30}),  # daily
    ]
    redis_settings = redis_settings
