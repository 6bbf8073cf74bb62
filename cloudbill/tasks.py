from typing import Any

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings
from arq.jobs import Job

from cloudbill.core.config import settings

# Redis connection settings
redis_settings = RedisSettings.from_dsn(settings.REDIS_URL)


async def get_redis_pool() -> ArqRedis:
    """Get or create Redis pool for arq"""
    return await create_pool(redis_settings)


async def enqueue_task(task_name: str, *args: Any, **kwargs: Any) -> Job:
    """
    Enqueue a task to the arq worker.

    Args:
        task_name: Name of the task function
        *args: Positional arguments for the task
        **kwargs: Keyword arguments for the task

    Returns:
        Job object from arq
    """
    pool = await get_redis_pool()
    try:
        job = await pool.enqueue_job(task_name, *args, **kwargs)
        return job  # type: ignore[return-value]
    finally:
        await pool.close()


async def enqueue_track_usage(account_id: str | None = None) -> Job:
    """Enqueue a usage sampling pass for one account, or every account."""
    return await enqueue_task("track_usage_task", account_id)


async def enqueue_generate_invoice(
    account_id: str, period_start: str, period_end: str
) -> Job:
    """Enqueue invoice generation for one account and period (ISO 8601 bounds)."""
    return await enqueue_task("generate_invoice_task", account_id, period_start, period_end)


async def enqueue_mark_overdue_invoices() -> Job:
    return await enqueue_task("mark_overdue_invoices_task")
