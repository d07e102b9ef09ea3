"""
Listing Shield Maintenance Tasks
Periodic cleanup triggered by Celery Beat
"""

import logging
from datetime import datetime, UTC, timedelta

from sqlalchemy import text

from listing_shield.models.job import TERMINAL_JOB_STATUSES
from listing_shield.worker.celery_app import celery_app
from listing_shield.worker.db import get_sync_db

logger = logging.getLogger(__name__)


@celery_app.task(name="cleanup_expired_cache")
def cleanup_expired_cache():
    """Run the cleanup_expired_cache stored procedure"""
    logger.info("Starting expired compliance cache sweep")

    try:
        with get_sync_db() as db:
            db.execute(text("SELECT cleanup_expired_cache()"))
            db.commit()

        logger.info("Expired compliance cache sweep complete")
        return {"status": "success"}

    except Exception as e:
        logger.error(f"Expired cache sweep failed: {str(e)}")
        raise


@celery_app.task(name="cleanup_old_jobs")
def cleanup_old_jobs(days: int = 30):
    """
    Delete completed/failed policy analysis jobs older than `days`.
    Pending and running jobs are never touched. Age falls back to
    updated_at/created_at for jobs that failed without a completed_at.
    """
    logger.info(f"Starting cleanup of jobs older than {days} days")

    try:
        with get_sync_db() as db:
            cutoff = datetime.now(UTC) - timedelta(days=days)

            result = db.execute(text("""
                DELETE FROM policy_analysis_jobs
                WHERE status = ANY(:statuses)
                  AND COALESCE(completed_at, updated_at, created_at) < :cutoff
                RETURNING id
            """), {"statuses": list(TERMINAL_JOB_STATUSES), "cutoff": cutoff})

            deleted_count = len(result.fetchall())
            db.commit()

            logger.info(f"Cleanup complete: {deleted_count} old jobs deleted")
            return {
                "status": "success",
                "jobs_deleted": deleted_count
            }

    except Exception as e:
        logger.error(f"Job cleanup failed: {str(e)}")
        raise
