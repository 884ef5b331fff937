#allotment/urls.py
from django.urls import path
from .views import (
    RunAllotmentView,
    PublishAllotmentView,
    UnpublishAllotmentView,
    AllotmentStatusView,
    CurrentRunView,
    RunHistoryView,
    DashboardStatsView,
    StudentResultView,
)

urlpatterns = [
    path("admin/allotment/run/", RunAllotmentView.as_view(), name="allotment-run"),
    path("admin/allotment/publish/", PublishAllotmentView.as_view(), name="allotment-publish"),
    path("admin/allotment/unpublish/", UnpublishAllotmentView.as_view(), name="allotment-unpublish"),
    path("admin/allotment/status/", AllotmentStatusView.as_view(), name="allotment-status"),
    path("admin/allotment/current/", CurrentRunView.as_view(), name="allotment-current"),
    path("admin/allotment/runs/", RunHistoryView.as_view(), name="allotment-runs"),
    path("admin/dashboard/stats/", DashboardStatsView.as_view(), name="dashboard-stats"),
    path("allotment/result/", StudentResultView.as_view(), name="allotment-result"),
]
