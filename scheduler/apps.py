# scheduler/apps.py
import atexit

from django.apps import AppConfig


class SchedulerConfig(AppConfig):
    """Owns the background thread pool used for notification delivery.

    The scheduler starts lazily on the first submitted job, so management
    commands such as ``migrate`` never spin it up.
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'scheduler'

    def ready(self):
        from .jobs import shutdown
        atexit.register(shutdown, wait=False)
