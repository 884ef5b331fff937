#allotment/serializers.py
from rest_framework import serializers

from .models import Allotment, AllotmentRun


class RunSummarySerializer(serializers.Serializer):
    students_processed = serializers.IntegerField()
    total_allotted = serializers.IntegerField()
    total_waitlisted = serializers.IntegerField()
    timestamp = serializers.CharField()


class AllotmentRunSerializer(serializers.ModelSerializer):
    created_by = serializers.CharField(source="created_by.username", read_only=True, default=None)
    is_superseded = serializers.BooleanField(read_only=True)
    warning_count = serializers.SerializerMethodField()

    class Meta:
        model = AllotmentRun
        fields = [
            "id", "created_at", "completed_at", "superseded_at", "is_superseded",
            "students_processed", "total_allotted", "total_waitlisted",
            "duration_ms", "warning_count", "created_by",
        ]
        read_only_fields = fields

    def get_warning_count(self, obj):
        return len(obj.warnings or [])


class AllotmentRowSerializer(serializers.ModelSerializer):
    course_name = serializers.SerializerMethodField()

    class Meta:
        model = Allotment
        fields = ["roll_no", "course_code", "course_name", "outcome", "rank", "level", "reason"]
        read_only_fields = fields

    def get_course_name(self, obj):
        return obj.course.course_name if obj.course_id else ""


class ResultItemSerializer(serializers.Serializer):
    course_id = serializers.CharField()
    course_name = serializers.CharField()
    credits = serializers.IntegerField()
    status = serializers.ChoiceField(choices=["allotted", "waitlisted"])
    rank = serializers.IntegerField()
    enrollment_date = serializers.CharField()


class StudentResultSerializer(serializers.Serializer):
    allotted = ResultItemSerializer(many=True)
    waitlisted = ResultItemSerializer(many=True)
    published = serializers.BooleanField()


class RunRequestSerializer(serializers.Serializer):
    workers = serializers.IntegerField(required=False, min_value=1, max_value=64)
