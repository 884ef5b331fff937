# allotment/views.py
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiExample
import logging

from users.permissions import IsAdminRole, IsStudentRole
from . import services
from .exceptions import AllotmentError
from .models import AllotmentRun
from .serializers import (
    AllotmentRowSerializer,
    AllotmentRunSerializer,
    RunRequestSerializer,
    RunSummarySerializer,
    StudentResultSerializer,
)

logger = logging.getLogger(__name__)


def _error(exc: AllotmentError):
    body = {"error": str(exc)}
    if getattr(exc, "problems", None):
        body["problems"] = exc.problems
    return Response(body, status=exc.status_code)


class RunAllotmentView(APIView):
    """
    Run the allotment from scratch. The new run replaces the current one and
    starts unpublished.
    """
    permission_classes = [IsAdminRole]

    @extend_schema(
        request=RunRequestSerializer,
        responses={200: RunSummarySerializer},
        examples=[OpenApiExample(
            "Run result",
            value={"result": {"students_processed": 120, "total_allotted": 310,
                              "total_waitlisted": 45, "timestamp": "2026-07-01T10:00:00+00:00"}},
            response_only=True,
        )],
    )
    def post(self, request):
        s = RunRequestSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            run = services.run_allotment(actor=request.user, workers=s.validated_data.get("workers"))
        except AllotmentError as exc:
            return _error(exc)
        return Response({"result": run.summary()}, status=status.HTTP_200_OK)


class PublishAllotmentView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=None, responses={200: dict})
    def post(self, request):
        try:
            published = services.publish(actor=request.user)
        except AllotmentError as exc:
            return _error(exc)
        return Response({"published": published})


class UnpublishAllotmentView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=None, responses={200: dict})
    def post(self, request):
        try:
            published = services.unpublish(actor=request.user)
        except AllotmentError as exc:
            return _error(exc)
        return Response({"published": published})


class AllotmentStatusView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(responses={200: dict})
    def get(self, request):
        return Response(services.publication_status())


class CurrentRunView(APIView):
    """
    The current run as admins see it, published or not: summary, the
    warnings raised while filtering, and every allotment row.
    Optional ``?roll_no=`` / ``?course=`` narrow the rows.
    """
    permission_classes = [IsAdminRole]

    @extend_schema(responses={200: dict})
    def get(self, request):
        detail = services.current_run_detail(
            roll_no=request.query_params.get("roll_no"),
            course_code=request.query_params.get("course"),
        )
        if detail is None:
            return Response({"run": None, "published": False, "warnings": [], "rows": []})

        detail["run"] = AllotmentRunSerializer(detail["run"]).data
        detail["rows"] = AllotmentRowSerializer(detail["rows"], many=True).data
        return Response(detail)


class RunHistoryView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(responses={200: AllotmentRunSerializer(many=True)})
    def get(self, request):
        runs = AllotmentRun.objects.select_related("created_by")[:50]
        return Response({"runs": AllotmentRunSerializer(runs, many=True).data})


class DashboardStatsView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(responses={200: dict})
    def get(self, request):
        return Response(services.dashboard_stats())


class StudentResultView(APIView):
    """The logged-in student's own results; empty until published."""
    permission_classes = [IsStudentRole]

    @extend_schema(responses={200: StudentResultSerializer})
    def get(self, request):
        return Response(services.student_result(request.user.student))
