"""
Test URLs for the users, courses, preferences and allotment apps.
"""
from django.test import SimpleTestCase
from django.urls import reverse, resolve
from rest_framework_simplejwt.views import TokenRefreshView

from allotment import views as allotment_views
from courses import views as course_views
from preferences import views as preference_views
from users import views


class URLTestCase(SimpleTestCase):
    """Test cases for URL patterns."""

    def assertRoute(self, name, path, view_class, args=None):
        url = reverse(name, args=args)
        self.assertEqual(url, path)
        self.assertEqual(resolve(url).func.view_class, view_class)

    def test_login_url(self):
        self.assertRoute('accounts:login', '/api/users/login/', views.LoginView)

    def test_token_refresh_url(self):
        self.assertRoute('accounts:token_refresh', '/api/users/token/refresh/', TokenRefreshView)

    def test_profile_url(self):
        self.assertRoute('accounts:profile', '/api/users/profile/', views.UserProfileView)

    def test_allotment_admin_urls(self):
        self.assertRoute('allotment-run', '/api/admin/allotment/run/', allotment_views.RunAllotmentView)
        self.assertRoute('allotment-publish', '/api/admin/allotment/publish/', allotment_views.PublishAllotmentView)
        self.assertRoute('allotment-unpublish', '/api/admin/allotment/unpublish/',
                         allotment_views.UnpublishAllotmentView)
        self.assertRoute('allotment-status', '/api/admin/allotment/status/', allotment_views.AllotmentStatusView)
        self.assertRoute('dashboard-stats', '/api/admin/dashboard/stats/', allotment_views.DashboardStatsView)

    def test_student_urls(self):
        self.assertRoute('allotment-result', '/api/allotment/result/', allotment_views.StudentResultView)
        self.assertRoute('preferences', '/api/preferences/', preference_views.PreferenceView)

    def test_course_urls(self):
        self.assertRoute('course-list', '/api/courses/', course_views.CourseListView)
        self.assertRoute('course-students', '/api/courses/CS101/students/',
                         course_views.CourseStudentsView, args=['CS101'])
