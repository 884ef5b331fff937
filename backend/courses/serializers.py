from rest_framework import serializers
from .models import Course, ElectiveSlot


class ElectiveSlotSerializer(serializers.ModelSerializer):
    """Serializer for ElectiveSlot model."""

    class Meta:
        model = ElectiveSlot
        fields = ['id', 'name', 'max_choices']
        read_only_fields = fields


class CourseSerializer(serializers.ModelSerializer):
    """
    Course with live seat counters. ``seat_counts`` in the context maps
    course_code to seats allotted in whichever run the caller may see.
    """
    course_id = serializers.CharField(source='course_code', read_only=True)
    elective_slot = serializers.CharField(source='elective_slot.name', read_only=True, default=None)
    max_choices = serializers.IntegerField(read_only=True)
    seats_allotted = serializers.SerializerMethodField()
    seats_available = serializers.SerializerMethodField()

    class Meta:
        model = Course
        fields = [
            'course_id', 'course_code', 'course_name', 'credits', 'faculty', 'timetable_slot',
            'capacity', 'seats_allotted', 'seats_available', 'course_type',
            'elective_slot', 'max_choices', 'semester', 'status',
        ]
        read_only_fields = fields

    def get_seats_allotted(self, obj):
        return self.context.get('seat_counts', {}).get(obj.course_code, 0)

    def get_seats_available(self, obj):
        return max(obj.capacity - self.get_seats_allotted(obj), 0)
