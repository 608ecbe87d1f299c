# attendance/urls.py
from django.urls import path
from .views import (
    AttendanceRecordListView,
    AttendanceRecordUpdateView,
    ChildMonthlyAttendanceView,
    ClassDailyAttendanceView,
    ClassTermAttendanceView,
    DailyAttendanceUpdateView,
    EditRequestListCreateView,
    MarkAttendanceView,
    MyEditRequestListView,
    ReviewEditRequestView,
    ScheduleAttendanceStatusView,
    ScheduleAttendanceView,
    StudentAttendanceHistoryView,
    StudentMonthlyAttendanceView,
    StudentTermSummaryView,
)

app_name = "attendance"

urlpatterns = [
    path("mark/", MarkAttendanceView.as_view(), name="mark"),
    path("records/", AttendanceRecordListView.as_view(), name="records"),
    path("records/<int:pk>/", AttendanceRecordUpdateView.as_view(), name="record_update"),
    path("daily/<int:pk>/", DailyAttendanceUpdateView.as_view(), name="daily_update"),

    path("schedules/<int:pk>/", ScheduleAttendanceView.as_view(), name="schedule_attendance"),
    path("schedules/<int:pk>/status/", ScheduleAttendanceStatusView.as_view(), name="schedule_status"),

    path("students/<int:pk>/", StudentAttendanceHistoryView.as_view(), name="student_history"),
    path("students/<int:pk>/monthly/", StudentMonthlyAttendanceView.as_view(), name="student_monthly"),
    path("students/<int:pk>/term/", StudentTermSummaryView.as_view(), name="student_term"),
    path(
        "children/<str:registration_number>/monthly/",
        ChildMonthlyAttendanceView.as_view(),
        name="child_monthly",
    ),

    path("classes/<int:pk>/daily/", ClassDailyAttendanceView.as_view(), name="class_daily"),
    path("classes/<int:pk>/term/", ClassTermAttendanceView.as_view(), name="class_term"),

    path("edit-requests/", EditRequestListCreateView.as_view(), name="edit_requests"),
    path("edit-requests/mine/", MyEditRequestListView.as_view(), name="my_edit_requests"),
    path("edit-requests/<int:pk>/review/", ReviewEditRequestView.as_view(), name="review_edit_request"),
]
