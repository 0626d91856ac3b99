from collections.abc import Mapping
from typing import Any
from uuid import UUID

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings
from arq.jobs import Job

from bookmyenv.core.config import settings

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


async def enqueue_refresh_notifications(
    intent_id: UUID,
    event_type: str,
    extra: Mapping[str, Any] | None = None,
) -> Job:
    """Enqueue notification fan-out for one refresh intent event."""
    return await enqueue_task(
        "send_refresh_notifications_task",
        str(intent_id),
        str(event_type),
        dict(extra) if extra else None,
    )


async def enqueue_reminder_scan() -> Job:
    """Enqueue an immediate reminder scan outside the cron schedule."""
    return await enqueue_task("process_scheduled_reminders_task")
