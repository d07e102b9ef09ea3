# Celery Tasks
from listing_shield.worker.tasks.maintenance import (
    cleanup_expired_cache,
    cleanup_old_jobs,
)

__all__ = [
    # Scheduled Tasks (Celery Beat)
    "cleanup_expired_cache",
    "cleanup_old_jobs",
]
