"""
Test views for the allotment app.
"""
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from allotment import services
from allotment.models import AllotmentState
from courses.factory import CourseFactory
from preferences.models import Preference
from users.factory import AdminUserFactory, StudentFactory, UserFactory
from users.models import ROLE_ADMIN


class AllotmentViewTestCase(APITestCase):

    def setUp(self):
        self.admin = AdminUserFactory(username="registrar")
        self.course = CourseFactory(course_code="CS101", capacity=1)
        self.alice = StudentFactory(roll_no="21CS0001", cgpa=Decimal("9.00"))
        self.bob = StudentFactory(roll_no="21CS0002", cgpa=Decimal("8.00"))
        Preference.objects.create(student=self.alice, course=self.course, rank=1)
        Preference.objects.create(student=self.bob, course=self.course, rank=1)


class AdminAllotmentViewsTestCase(AllotmentViewTestCase):
    """Test cases for the admin allotment endpoints."""

    def setUp(self):
        super().setUp()
        self.client.force_authenticate(user=self.admin)

    def test_run(self):
        response = self.client.post(reverse("allotment-run"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        result = response.data["result"]
        self.assertEqual(result["students_processed"], 2)
        self.assertEqual(result["total_allotted"], 1)
        self.assertEqual(result["total_waitlisted"], 1)
        self.assertIn("timestamp", result)

    def test_run_with_workers(self):
        response = self.client.post(reverse("allotment-run"), {"workers": 4}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_run_rejects_bad_workers(self):
        response = self.client.post(reverse("allotment-run"), {"workers": 0}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_run_while_locked(self):
        AllotmentState.objects.create(pk=1, running=True, lock_acquired_at=timezone.now())

        response = self.client.post(reverse("allotment-run"))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn("in progress", response.data["error"])

    def test_run_with_bad_course_data(self):
        CourseFactory(course_code="CS999", capacity=-1)

        response = self.client.post(reverse("allotment-run"))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("error", response.data)
        self.assertEqual(len(response.data["problems"]), 1)

    def test_run_when_database_unavailable(self):
        with mock.patch.object(services, "load_roster", side_effect=DatabaseError("connection lost")):
            response = self.client.post(reverse("allotment-run"))

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertIn("retry", response.data["error"])

    def test_publish_without_run(self):
        response = self.client.post(reverse("allotment-publish"))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn("error", response.data)

    def test_publish_unpublish_status(self):
        self.client.post(reverse("allotment-run"))
        self.assertEqual(self.client.get(reverse("allotment-status")).data, {"published": False})

        response = self.client.post(reverse("allotment-publish"))
        self.assertEqual(response.data, {"published": True})
        self.assertEqual(self.client.get(reverse("allotment-status")).data, {"published": True})

        response = self.client.post(reverse("allotment-unpublish"))
        self.assertEqual(response.data, {"published": False})
        self.assertEqual(self.client.get(reverse("allotment-status")).data, {"published": False})

    def test_current_run(self):
        empty = self.client.get(reverse("allotment-current"))
        self.assertIsNone(empty.data["run"])

        self.client.post(reverse("allotment-run"))
        response = self.client.get(reverse("allotment-current"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["published"])
        self.assertEqual(len(response.data["rows"]), 2)
        self.assertEqual(response.data["result"]["total_allotted"], 1)

        filtered = self.client.get(reverse("allotment-current"), {"roll_no": "21cs0002"})
        self.assertEqual([r["outcome"] for r in filtered.data["rows"]], ["WAITLISTED"])

    def test_run_history(self):
        services.run_allotment(actor=self.admin)
        services.run_allotment(actor=self.admin)

        response = self.client.get(reverse("allotment-runs"))

        runs = response.data["runs"]
        self.assertEqual(len(runs), 2)
        self.assertFalse(runs[0]["is_superseded"])
        self.assertTrue(runs[1]["is_superseded"])
        self.assertEqual(runs[0]["created_by"], "registrar")

    def test_dashboard_stats(self):
        services.run_allotment()

        response = self.client.get(reverse("dashboard-stats"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_students"], 2)
        self.assertEqual(response.data["seats_allotted"], 1)
        self.assertEqual(response.data["utilization_percent"], 100.0)

    def test_admin_role_without_staff_flag(self):
        user = UserFactory(username="coordinator")
        user.assign_role(ROLE_ADMIN)
        self.client.force_authenticate(user=user)

        response = self.client.get(reverse("allotment-status"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class AllotmentPermissionTestCase(AllotmentViewTestCase):
    """Students and anonymous users cannot reach admin endpoints."""

    def test_anonymous_is_rejected(self):
        response = self.client.post(reverse("allotment-run"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_student_cannot_run_or_publish(self):
        self.client.force_authenticate(user=self.alice.user)

        for name in ("allotment-run", "allotment-publish", "allotment-unpublish"):
            response = self.client.post(reverse(name))
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, name)
        response = self.client.get(reverse("allotment-current"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_has_no_student_result(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse("allotment-result"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class StudentResultViewTestCase(AllotmentViewTestCase):
    """Test cases for StudentResultView."""

    def setUp(self):
        super().setUp()
        services.run_allotment()
        self.url = reverse("allotment-result")

    def test_hidden_until_published(self):
        self.client.force_authenticate(user=self.alice.user)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"allotted": [], "waitlisted": [], "published": False})

    def test_published_results_are_scoped_to_student(self):
        services.publish()

        self.client.force_authenticate(user=self.alice.user)
        alice = self.client.get(self.url).data
        self.client.force_authenticate(user=self.bob.user)
        bob = self.client.get(self.url).data

        self.assertTrue(alice["published"])
        self.assertEqual([i["course_id"] for i in alice["allotted"]], ["CS101"])
        self.assertEqual(alice["waitlisted"], [])
        self.assertEqual(bob["allotted"], [])
        self.assertEqual([i["status"] for i in bob["waitlisted"]], ["waitlisted"])
