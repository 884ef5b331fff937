from django.urls import path
from .views import CourseListView, CourseStudentsView

urlpatterns = [
    path("", CourseListView.as_view(), name="course-list"),
    path("<str:course_code>/students/", CourseStudentsView.as_view(), name="course-students"),
]
