# courses/views.py
from django.shortcuts import get_object_or_404
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter

from allotment import services
from users.permissions import IsAdminRole, is_admin_user
from .models import Course
from .serializers import CourseSerializer


class CourseListView(APIView):
    """
    Course catalogue. Admins see every course and seat counts from the current
    run; students see active courses and counts only once results are
    published.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        parameters=[
            OpenApiParameter("type", str, description="core or elective"),
            OpenApiParameter("slot", str, description="elective slot name"),
            OpenApiParameter("status", str, description="active or inactive (admins only)"),
        ],
        responses={200: CourseSerializer(many=True)},
    )
    def get(self, request):
        admin = is_admin_user(request.user)
        qs = Course.objects.select_related("elective_slot")
        if admin:
            status_filter = request.query_params.get("status")
            if status_filter:
                qs = qs.filter(status=status_filter)
        else:
            qs = qs.filter(status=Course.STATUS_ACTIVE)

        course_type = request.query_params.get("type")
        slot = request.query_params.get("slot")
        if course_type:
            qs = qs.filter(course_type=course_type)
        if slot:
            qs = qs.filter(elective_slot__name__iexact=slot)

        run = services.current_run() if admin else services.published_run()
        data = CourseSerializer(qs, many=True, context={"seat_counts": services.seat_counts(run)}).data
        return Response({"courses": data})


class CourseStudentsView(APIView):
    """Students allotted or waitlisted for one course in the current run."""
    permission_classes = [IsAdminRole]

    @extend_schema(responses={200: dict})
    def get(self, request, course_code):
        course = get_object_or_404(Course, course_code__iexact=course_code)
        return Response(services.course_roster(course, services.current_run()))
