# scheduler/jobs.py
import logging
import threading

from apscheduler.events import EVENT_JOB_ERROR
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.schedulers.background import BackgroundScheduler
from django.conf import settings
from django.db import close_old_connections

logger = logging.getLogger(__name__)

_scheduler = None
_lock = threading.Lock()


def _log_job_error(event):
    logger.error("Background job %s failed: %s", event.job_id, event.exception, exc_info=event.exception)


def get_scheduler():
    """Return the process-wide background scheduler, starting it on first use."""
    global _scheduler
    with _lock:
        if _scheduler is None:
            scheduler = BackgroundScheduler(
                executors={"default": ThreadPoolExecutor(settings.NOTIFICATION_WORKERS)},
                job_defaults={"coalesce": False, "misfire_grace_time": None},
                timezone=settings.TIME_ZONE,
            )
            scheduler.add_listener(_log_job_error, EVENT_JOB_ERROR)
            scheduler.start()
            _scheduler = scheduler
            logger.info("Background scheduler started with %s workers", settings.NOTIFICATION_WORKERS)
    return _scheduler


def _run(func, *args):
    try:
        return func(*args)
    finally:
        # Worker threads hold their own DB connections.
        close_old_connections()


def submit(func, *args):
    """Run ``func(*args)`` on the scheduler's thread pool as soon as possible."""
    return get_scheduler().add_job(_run, args=(func, *args), name=getattr(func, "__name__", "job"))


def shutdown(wait=True):
    global _scheduler
    with _lock:
        if _scheduler is not None:
            _scheduler.shutdown(wait=wait)
            _scheduler = None
            logger.info("Background scheduler stopped")
