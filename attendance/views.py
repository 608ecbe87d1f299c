# attendance/views.py

from rest_framework import generics, status
from rest_framework.views import APIView

from core.exceptions import Forbidden, NotFound
from core.mixins import EnvelopeMixin, RoleRequiredMixin
from core.permissions import user_is_parent, user_is_student
from students.models import Student
from . import reports, services
from .serializers import (
    AttendancePatchSerializer,
    CreateEditRequestSerializer,
    DailyAttendancePatchSerializer,
    DailyAttendanceSerializer,
    DateQuerySerializer,
    EditRequestFilterSerializer,
    EditRequestSerializer,
    MarkAttendanceSerializer,
    OptionalDateQuerySerializer,
    RecordFilterSerializer,
    ReviewEditRequestSerializer,
    ScheduleAttendanceSerializer,
    TermQuerySerializer,
)


def _validated(serializer_class, data):
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def _ensure_can_view_student(user, student_id):
    """Students see only themselves, parents only their children."""
    student = Student.objects.filter(pk=student_id).first()
    if student is None:
        raise NotFound("Student not found")
    if user_is_student(user) and student.user_id != user.pk:
        raise Forbidden("You can only view your own attendance")
    if user_is_parent(user) and student.parent_id != user.pk:
        raise Forbidden("You can only view attendance for your own children")
    return student


# ---------------------------------------------------------------------------
#  Marking and direct updates
# ---------------------------------------------------------------------------

class MarkAttendanceView(RoleRequiredMixin, EnvelopeMixin, APIView):
    allowed_roles = ["TEACHER"]

    def post(self, request):
        data = _validated(MarkAttendanceSerializer, request.data)
        result = services.mark_attendance(
            request.user,
            date=data["date"],
            records=data["records"],
            schedule_id=data.get("schedule_id"),
            class_id=data.get("class_id"),
        )
        message = result.pop("message")
        return self.envelope(message, result, status=status.HTTP_201_CREATED)


class AttendanceRecordListView(RoleRequiredMixin, generics.GenericAPIView):
    allowed_roles = ["ADMIN", "TEACHER"]
    serializer_class = ScheduleAttendanceSerializer

    def get(self, request):
        filters = _validated(RecordFilterSerializer, request.query_params)
        page = self.paginate_queryset(reports.filter_attendance_records(**filters))
        return self.get_paginated_response(self.get_serializer(page, many=True).data)


class AttendanceRecordUpdateView(RoleRequiredMixin, EnvelopeMixin, APIView):
    allowed_roles = ["ADMIN", "TEACHER"]

    def patch(self, request, pk):
        patch = _validated(AttendancePatchSerializer, request.data)
        record = services.update_attendance(pk, patch)
        return self.envelope("Attendance updated successfully", ScheduleAttendanceSerializer(record).data)


class DailyAttendanceUpdateView(RoleRequiredMixin, EnvelopeMixin, APIView):
    allowed_roles = ["ADMIN", "TEACHER"]

    def patch(self, request, pk):
        patch = _validated(DailyAttendancePatchSerializer, request.data)
        record = services.update_student_daily_attendance(pk, patch)
        return self.envelope("Student daily attendance updated successfully", DailyAttendanceSerializer(record).data)


# ---------------------------------------------------------------------------
#  Schedule slots
# ---------------------------------------------------------------------------

class ScheduleAttendanceView(RoleRequiredMixin, EnvelopeMixin, APIView):
    allowed_roles = ["ADMIN", "TEACHER"]

    def get(self, request, pk):
        day = _validated(DateQuerySerializer, request.query_params)["date"]
        records = reports.get_schedule_attendance(pk, day)
        return self.envelope(
            "Attendance retrieved successfully",
            ScheduleAttendanceSerializer(records, many=True).data,
        )


class ScheduleAttendanceStatusView(RoleRequiredMixin, EnvelopeMixin, APIView):
    allowed_roles = ["ADMIN", "TEACHER"]

    def get(self, request, pk):
        day = _validated(DateQuerySerializer, request.query_params)["date"]
        return self.envelope("Attendance status retrieved", reports.is_attendance_marked(pk, day))


# ---------------------------------------------------------------------------
#  Students and parents
# ---------------------------------------------------------------------------

class StudentAttendanceHistoryView(RoleRequiredMixin, generics.GenericAPIView):
    serializer_class = ScheduleAttendanceSerializer

    def get(self, request, pk):
        _ensure_can_view_student(request.user, pk)
        page = self.paginate_queryset(reports.filter_attendance_records(student_id=pk))
        return self.get_paginated_response(self.get_serializer(page, many=True).data)


class StudentMonthlyAttendanceView(RoleRequiredMixin, EnvelopeMixin, APIView):
    def get(self, request, pk):
        _ensure_can_view_student(request.user, pk)
        on = _validated(OptionalDateQuerySerializer, request.query_params).get("date")
        return self.envelope(
            "Monthly attendance retrieved successfully",
            reports.student_monthly_attendance(pk, on=on),
        )


class StudentTermSummaryView(RoleRequiredMixin, EnvelopeMixin, APIView):
    def get(self, request, pk):
        _ensure_can_view_student(request.user, pk)
        query = _validated(TermQuerySerializer, request.query_params)
        return self.envelope(
            "Term attendance summary retrieved successfully",
            reports.student_term_summary(pk, query["session_id"], query["term"]),
        )


class ChildMonthlyAttendanceView(RoleRequiredMixin, EnvelopeMixin, APIView):
    allowed_roles = ["PARENT", "ADMIN"]

    def get(self, request, registration_number):
        on = _validated(OptionalDateQuerySerializer, request.query_params).get("date")
        parent = request.user if user_is_parent(request.user) else None
        return self.envelope(
            "Child monthly attendance retrieved successfully",
            reports.parent_child_monthly_attendance(registration_number, parent=parent, on=on),
        )


# ---------------------------------------------------------------------------
#  Classes
# ---------------------------------------------------------------------------

class ClassDailyAttendanceView(RoleRequiredMixin, EnvelopeMixin, APIView):
    allowed_roles = ["ADMIN", "TEACHER"]

    def get(self, request, pk):
        day = _validated(DateQuerySerializer, request.query_params)["date"]
        return self.envelope("Class attendance retrieved successfully", reports.class_daily_attendance(pk, day))


class ClassTermAttendanceView(RoleRequiredMixin, EnvelopeMixin, APIView):
    allowed_roles = ["ADMIN", "TEACHER"]

    def get(self, request, pk):
        query = _validated(TermQuerySerializer, request.query_params)
        return self.envelope(
            "Class term attendance retrieved successfully",
            reports.class_term_attendance(pk, query["session_id"], query["term"]),
        )


# ---------------------------------------------------------------------------
#  Edit requests
# ---------------------------------------------------------------------------

class EditRequestListCreateView(RoleRequiredMixin, EnvelopeMixin, generics.GenericAPIView):
    """GET lists every request (admins); POST files a new one (teachers)."""
    serializer_class = EditRequestSerializer

    @property
    def allowed_roles(self):
        return ["ADMIN"] if self.request.method == "GET" else ["TEACHER"]

    def get(self, request):
        status_filter = _validated(EditRequestFilterSerializer, request.query_params).get("status")
        page = self.paginate_queryset(services.list_edit_requests(status_filter))
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    def post(self, request):
        data = _validated(CreateEditRequestSerializer, request.data)
        result = services.create_edit_request(
            request.user,
            attendance_id=data["attendance_id"],
            attendance_type=data["attendance_type"],
            proposed_changes=data["proposed_changes"],
            reason=data["reason"],
        )
        return self.envelope("Edit request submitted successfully", result, status=status.HTTP_201_CREATED)


class MyEditRequestListView(RoleRequiredMixin, generics.GenericAPIView):
    allowed_roles = ["TEACHER"]
    serializer_class = EditRequestSerializer

    def get(self, request):
        page = self.paginate_queryset(services.list_my_edit_requests(request.user))
        return self.get_paginated_response(self.get_serializer(page, many=True).data)


class ReviewEditRequestView(RoleRequiredMixin, EnvelopeMixin, APIView):
    allowed_roles = ["ADMIN"]

    def post(self, request, pk):
        data = _validated(ReviewEditRequestSerializer, request.data)
        result = services.review_edit_request(
            pk,
            request.user,
            status=data["status"],
            admin_comment=data.get("admin_comment"),
        )
        return self.envelope(f"Edit request {result['status'].lower()} successfully", result)
