"""
Test models for the courses app.
"""
from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.test import TestCase

from courses.factory import CourseFactory, ElectiveCourseFactory, ElectiveSlotFactory
from courses.models import Course


class CourseModelTestCase(TestCase):
    """Test cases for Course validation."""

    def test_elective_requires_slot(self):
        course = CourseFactory.build(course_code="EL500", course_type=Course.TYPE_ELECTIVE)
        with self.assertRaises(ValidationError) as cm:
            course.full_clean()
        self.assertIn("elective_slot", cm.exception.message_dict)

    def test_core_cannot_have_slot(self):
        slot = ElectiveSlotFactory(name="Elective-1")
        course = CourseFactory.build(course_code="CS500", elective_slot=slot)
        with self.assertRaises(ValidationError) as cm:
            course.full_clean()
        self.assertIn("elective_slot", cm.exception.message_dict)

    def test_negative_capacity_fails_validation(self):
        course = CourseFactory.build(course_code="CS501", capacity=-1)
        with self.assertRaises(ValidationError) as cm:
            course.full_clean()
        self.assertIn("capacity", cm.exception.message_dict)

    def test_clean_normalizes_code(self):
        course = CourseFactory.build(course_code=" cs502 ")
        course.clean()
        self.assertEqual(course.course_code, "CS502")

    def test_course_code_unique(self):
        CourseFactory(course_code="CS503")
        with self.assertRaises(IntegrityError):
            Course.objects.create(course_code="CS503", course_name="Duplicate")

    def test_elective_properties(self):
        slot = ElectiveSlotFactory(name="Elective-2", max_choices=2)
        elective = ElectiveCourseFactory(elective_slot=slot)
        core = CourseFactory()

        self.assertTrue(elective.is_elective)
        self.assertEqual(elective.max_choices, 2)
        self.assertFalse(core.is_elective)
        self.assertIsNone(core.max_choices)
        self.assertEqual(slot.courses.count(), 1)
