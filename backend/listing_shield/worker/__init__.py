# Celery Worker Module
# Lazy import so submodules can be imported without the sync DB driver

def __getattr__(name):
    """Lazy import celery_app only when explicitly accessed."""
    if name == "celery_app":
        from listing_shield.worker.celery_app import celery_app
        return celery_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = ["celery_app"]
