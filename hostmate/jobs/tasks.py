"""Background job tasks"""

import asyncio
import structlog

from hostmate.jobs.celery_app import celery_app

logger = structlog.get_logger()


def run_async(coro):
    """Helper to run async functions in sync context"""
    return asyncio.run(coro)


@celery_app.task(name="process_email_queue")
def process_email_queue():
    """Deliver a batch of pending emails"""
    logger.info("Processing email queue")

    async def _process():
        from hostmate.database import SessionLocal, engine
        from hostmate.services.email import process_email_queue as process_queue

        async with SessionLocal() as db:
            result = await process_queue(db)
        # Each task runs in a fresh event loop
        await engine.dispose()
        return result.processed

    return run_async(_process())


@celery_app.task(name="cleanup_past_reservations")
def cleanup_past_reservations():
    """Remove reservations scheduled before today (UTC)"""
    logger.info("Cleaning up past reservations")

    async def _cleanup():
        from hostmate.database import SessionLocal, engine
        from hostmate.services.cleanup import cleanup_past_reservations as sweep

        async with SessionLocal() as db:
            result = await sweep(db)
        await engine.dispose()

        if not result.success:
            logger.error("Scheduled cleanup failed", error=result.error)
        return result.deleted_count

    return run_async(_cleanup())
