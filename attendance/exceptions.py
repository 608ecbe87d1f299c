from core.exceptions import BadRequest, Conflict


class AttendanceLocked(Conflict):
    """Raised on a direct write to a locked record; changes must go through an edit request."""
    default_message = "Attendance record is locked. Submit an edit request to change it."


class StaleEditRequest(BadRequest):
    """Raised when the target record changed after the edit request was filed."""
    default_message = (
        "This edit request is stale: the attendance record was modified after the request was created. "
        "Please submit a new request."
    )
