#allotment/roster.py
"""
Roster loading: read students, courses and ranked preferences out of the
database into plain records the engine can work on without touching the ORM.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from courses.models import Course
from preferences.models import Preference
from users.models import Student


@dataclass(frozen=True)
class StudentRecord:
    roll_no: str
    cgpa: Optional[Decimal] = None
    status: str = Student.STATUS_ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == Student.STATUS_ACTIVE


@dataclass(frozen=True)
class CourseRecord:
    course_code: str
    capacity: int
    course_type: str = Course.TYPE_CORE
    elective_slot: Optional[str] = None
    max_choices: Optional[int] = None
    status: str = Course.STATUS_ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == Course.STATUS_ACTIVE

    @property
    def is_elective(self) -> bool:
        return self.course_type == Course.TYPE_ELECTIVE


@dataclass(frozen=True)
class PreferenceRecord:
    roll_no: str
    course_code: str
    rank: int


@dataclass
class Roster:
    students: List[StudentRecord] = field(default_factory=list)
    courses: List[CourseRecord] = field(default_factory=list)
    preferences: List[PreferenceRecord] = field(default_factory=list)


def load_roster(using: str = "default") -> Roster:
    """Snapshot every student, course and preference row."""
    students = [
        StudentRecord(roll_no=roll_no, cgpa=cgpa, status=status)
        for roll_no, cgpa, status in (Student.objects.using(using)
                                      .order_by("roll_no")
                                      .values_list("roll_no", "cgpa", "status"))
    ]

    courses = [
        CourseRecord(
            course_code=c.course_code,
            capacity=c.capacity,
            course_type=c.course_type,
            elective_slot=c.elective_slot.name if c.elective_slot_id else None,
            max_choices=c.elective_slot.max_choices if c.elective_slot_id else None,
            status=c.status,
        )
        for c in (Course.objects.using(using)
                  .select_related("elective_slot")
                  .order_by("course_code"))
    ]

    preferences = [
        PreferenceRecord(roll_no=roll_no, course_code=course_code, rank=rank)
        for roll_no, course_code, rank in (Preference.objects.using(using)
                                           .order_by("student__roll_no", "rank")
                                           .values_list("student__roll_no", "course__course_code", "rank"))
    ]

    return Roster(students=students, courses=courses, preferences=preferences)
