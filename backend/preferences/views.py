# preferences/views.py
from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiExample
import logging

from users.models import Student
from users.permissions import IsStudentRole
from .models import Preference
from .serializers import PreferenceListSerializer, PreferenceSerializer

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = (Student.STATUS_ACTIVE, Student.STATUS_PENDING)


def preference_deadline():
    """``PREFERENCE_DEADLINE`` (parsed once in settings) as an aware datetime."""
    deadline = settings.PREFERENCE_DEADLINE
    if deadline is None:
        return None
    if timezone.is_naive(deadline):
        deadline = timezone.make_aware(deadline)
    return deadline


def deadline_passed(now=None):
    deadline = preference_deadline()
    return deadline is not None and (now or timezone.now()) > deadline


class PreferenceView(APIView):
    """
    GET the logged-in student's ranked course list, or PUT a full replacement
    before the submission deadline.
    """
    permission_classes = [IsStudentRole]

    def _payload(self, student):
        prefs = (Preference.objects
                 .filter(student=student)
                 .select_related("course", "course__elective_slot")
                 .order_by("rank"))
        deadline = preference_deadline()
        return {
            "preferences": PreferenceSerializer(prefs, many=True).data,
            "deadline": deadline.isoformat() if deadline else None,
            "can_edit": student.status in EDITABLE_STATUSES and not deadline_passed(),
        }

    @extend_schema(responses={200: dict})
    def get(self, request):
        return Response(self._payload(request.user.student))

    @extend_schema(
        request=PreferenceListSerializer,
        responses={200: dict},
        examples=[OpenApiExample(
            "Ranked list",
            value={"preferences": [{"course_id": "CS101", "rank": 1}, {"course_id": "EL201", "rank": 2}]},
            request_only=True,
        )],
    )
    def put(self, request):
        student = request.user.student
        if student.status not in EDITABLE_STATUSES:
            return Response({"error": "Your registration does not allow preference changes."},
                            status=status.HTTP_403_FORBIDDEN)
        if deadline_passed():
            return Response({"error": "The preference submission deadline has passed."},
                            status=status.HTTP_400_BAD_REQUEST)

        s = PreferenceListSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        items = s.validated_data["preferences"]

        with transaction.atomic():
            Preference.objects.filter(student=student).delete()
            Preference.objects.bulk_create([
                Preference(student=student, course=item["course"], rank=item["rank"])
                for item in items
            ])
        logger.info("Student %s saved %d preference(s)", student.roll_no, len(items))
        return Response(self._payload(student), status=status.HTTP_200_OK)
