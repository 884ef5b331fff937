"""
Factories for courses and elective slots.
"""
import factory
from factory.django import DjangoModelFactory

from courses.models import Course, ElectiveSlot


class ElectiveSlotFactory(DjangoModelFactory):
    class Meta:
        model = ElectiveSlot
        django_get_or_create = ('name',)

    name = factory.Sequence(lambda n: f"Elective-{n + 1}")
    max_choices = 1


class CourseFactory(DjangoModelFactory):
    """Active core course; pass ``elective_slot`` with ``course_type='elective'``."""

    class Meta:
        model = Course
        django_get_or_create = ('course_code',)

    course_code = factory.Sequence(lambda n: f"CS{101 + n}")
    course_name = factory.Faker('catch_phrase')
    credits = 3
    faculty = factory.Faker('name')
    capacity = 30
    course_type = Course.TYPE_CORE
    elective_slot = None
    status = Course.STATUS_ACTIVE


class ElectiveCourseFactory(CourseFactory):
    course_code = factory.Sequence(lambda n: f"EL{201 + n}")
    course_type = Course.TYPE_ELECTIVE
    elective_slot = factory.SubFactory(ElectiveSlotFactory)
