from collections import Counter

from rest_framework import serializers

from courses.models import Course
from .models import Preference


class PreferenceSerializer(serializers.ModelSerializer):
    """Serializer for Preference model (read)."""
    course_id = serializers.CharField(source='course.course_code', read_only=True)
    course_name = serializers.CharField(source='course.course_name', read_only=True)
    course_type = serializers.CharField(source='course.course_type', read_only=True)
    elective_slot = serializers.CharField(source='course.elective_slot.name', read_only=True, default=None)

    class Meta:
        model = Preference
        fields = ['course_id', 'course_name', 'course_type', 'elective_slot', 'rank', 'updated_at']
        read_only_fields = fields


class PreferenceItemSerializer(serializers.Serializer):
    course_id = serializers.CharField(max_length=20)
    rank = serializers.IntegerField(min_value=1)

    def validate_course_id(self, value):
        return value.upper().strip()


class PreferenceListSerializer(serializers.Serializer):
    """
    A student's complete ranked list. Ranks must run 1..n without gaps, each
    course may appear once, and no elective slot may hold more entries than
    its ``max_choices``.
    """
    preferences = PreferenceItemSerializer(many=True, allow_empty=True)

    def validate_preferences(self, items):
        codes = [item['course_id'] for item in items]
        duplicates = sorted(code for code, n in Counter(codes).items() if n > 1)
        if duplicates:
            raise serializers.ValidationError(f"Course(s) listed more than once: {', '.join(duplicates)}")

        ranks = sorted(item['rank'] for item in items)
        if ranks != list(range(1, len(items) + 1)):
            raise serializers.ValidationError("Ranks must be 1..n with no gaps or repeats.")

        courses = {
            c.course_code: c
            for c in Course.objects.select_related('elective_slot').filter(course_code__in=codes)
        }
        unknown = [code for code in codes if code not in courses]
        if unknown:
            raise serializers.ValidationError(f"Unknown course(s): {', '.join(unknown)}")
        inactive = [code for code in codes if courses[code].status != Course.STATUS_ACTIVE]
        if inactive:
            raise serializers.ValidationError(f"Course(s) not open for selection: {', '.join(inactive)}")

        per_slot = Counter(courses[code].elective_slot for code in codes if courses[code].is_elective)
        for slot, count in per_slot.items():
            if slot is not None and count > slot.max_choices:
                raise serializers.ValidationError(
                    f"{slot.name} allows at most {slot.max_choices} choice(s); {count} given."
                )

        for item in items:
            item['course'] = courses[item['course_id']]
        return items
