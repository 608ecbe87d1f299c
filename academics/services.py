import logging

from core.exceptions import Conflict, NotFound
from .models import AcademicSession

logger = logging.getLogger(__name__)


def get_active_session():
    """Return the single ACTIVE academic session.

    Raises NotFound when none is active and Conflict when several are.
    Attendance services take this as their default ``session_provider``.
    """
    sessions = list(AcademicSession.objects.filter(status=AcademicSession.Status.ACTIVE)[:2])
    if not sessions:
        raise NotFound("No active academic session found")
    if len(sessions) > 1:
        logger.error("More than one academic session is marked ACTIVE")
        raise Conflict("Multiple active academic sessions found")
    return sessions[0]
