"""
Test models for the preferences app.
"""
from django.db import IntegrityError, transaction
from django.test import TestCase

from courses.factory import CourseFactory
from preferences.models import Preference
from users.factory import StudentFactory


class PreferenceModelTestCase(TestCase):
    """Test cases for Preference constraints."""

    def setUp(self):
        self.student = StudentFactory()
        self.cs101 = CourseFactory(course_code="CS101")
        self.cs102 = CourseFactory(course_code="CS102")
        Preference.objects.create(student=self.student, course=self.cs101, rank=1)

    def test_rank_unique_per_student(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            Preference.objects.create(student=self.student, course=self.cs102, rank=1)

    def test_course_unique_per_student(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            Preference.objects.create(student=self.student, course=self.cs101, rank=2)

    def test_other_students_may_reuse_rank(self):
        other = StudentFactory()
        Preference.objects.create(student=other, course=self.cs101, rank=1)
        self.assertEqual(self.cs101.preferences.count(), 2)

    def test_str(self):
        pref = Preference.objects.get(student=self.student)
        self.assertEqual(str(pref), f"{self.student.roll_no} #1: CS101")
