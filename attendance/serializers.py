# attendance/serializers.py
from rest_framework import serializers

from .models import (
    AttendanceEditRequest,
    AttendanceType,
    EditRequestStatus,
    ScheduleBasedAttendance,
    StudentDailyAttendance,
)


# ---------------------------------------------------------------------------
#  Input
# ---------------------------------------------------------------------------

class AttendanceEntrySerializer(serializers.Serializer):
    student_id = serializers.IntegerField(min_value=1)
    status = serializers.CharField(max_length=15)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class MarkAttendanceSerializer(serializers.Serializer):
    schedule_id = serializers.IntegerField(required=False, min_value=1)
    class_id = serializers.IntegerField(required=False, min_value=1)
    date = serializers.DateField()
    records = AttendanceEntrySerializer(many=True, allow_empty=False)

    def validate(self, attrs):
        if not attrs.get("schedule_id") and not attrs.get("class_id"):
            raise serializers.ValidationError("Either schedule_id or class_id must be provided")
        if attrs.get("schedule_id") and attrs.get("class_id"):
            raise serializers.ValidationError("Cannot provide both schedule_id and class_id")
        return attrs


class AttendancePatchSerializer(serializers.Serializer):
    status = serializers.CharField(required=False, max_length=15)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class DailyAttendancePatchSerializer(AttendancePatchSerializer):
    check_in_time = serializers.TimeField(required=False, allow_null=True)
    check_out_time = serializers.TimeField(required=False, allow_null=True)


class RecordFilterSerializer(serializers.Serializer):
    schedule_id = serializers.IntegerField(required=False, min_value=1)
    student_id = serializers.IntegerField(required=False, min_value=1)
    status = serializers.CharField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class DateQuerySerializer(serializers.Serializer):
    date = serializers.DateField()


class OptionalDateQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)


class TermQuerySerializer(serializers.Serializer):
    session_id = serializers.IntegerField(min_value=1)
    term = serializers.CharField()


class CreateEditRequestSerializer(serializers.Serializer):
    attendance_id = serializers.IntegerField(min_value=1)
    attendance_type = serializers.ChoiceField(choices=AttendanceType.choices)
    proposed_changes = serializers.DictField()
    reason = serializers.CharField(allow_blank=True)


class ReviewEditRequestSerializer(serializers.Serializer):
    status = serializers.CharField()
    admin_comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class EditRequestFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=EditRequestStatus.choices, required=False)


# ---------------------------------------------------------------------------
#  Output
# ---------------------------------------------------------------------------

class ScheduleAttendanceSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source="student.full_name", read_only=True)

    class Meta:
        model = ScheduleBasedAttendance
        fields = [
            "id", "student", "student_name", "schedule", "session", "date", "status",
            "notes", "marked_by", "marked_at", "is_locked", "created_at", "updated_at",
        ]


class DailyAttendanceSerializer(serializers.ModelSerializer):
    class Meta:
        model = StudentDailyAttendance
        fields = [
            "id", "student", "class_program", "session", "date", "status", "check_in_time",
            "check_out_time", "notes", "marked_by", "marked_at", "is_locked", "created_at", "updated_at",
        ]


class EditRequestSerializer(serializers.ModelSerializer):
    reviewer = serializers.SerializerMethodField()

    class Meta:
        model = AttendanceEditRequest
        fields = [
            "id", "attendance_id", "attendance_type", "requested_by", "proposed_changes", "reason",
            "status", "reviewer", "reviewed_at", "admin_comment", "created_at", "updated_at",
        ]

    def get_reviewer(self, obj):
        if obj.reviewed_by_id is None:
            return None
        return {"id": obj.reviewed_by_id, "name": obj.reviewed_by.display_name}
