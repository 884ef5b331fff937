"""
Roster builders shared by the allotment tests.
"""
import random
from decimal import Decimal

from allotment.roster import CourseRecord, PreferenceRecord, Roster, StudentRecord
from courses.models import Course


def core(code, capacity, status=Course.STATUS_ACTIVE):
    return CourseRecord(course_code=code, capacity=capacity, status=status)


def elective(code, capacity, slot, max_choices=1, status=Course.STATUS_ACTIVE):
    return CourseRecord(
        course_code=code,
        capacity=capacity,
        course_type=Course.TYPE_ELECTIVE,
        elective_slot=slot,
        max_choices=max_choices,
        status=status,
    )


def student(roll_no, cgpa=None, status="active"):
    return StudentRecord(roll_no=roll_no, cgpa=Decimal(str(cgpa)) if cgpa is not None else None, status=status)


def prefs(roll_no, *codes):
    """Preference records ranked in the order given (rank 1 first)."""
    return [PreferenceRecord(roll_no=roll_no, course_code=code, rank=i) for i, code in enumerate(codes, start=1)]


def random_roster(seed=7, n_students=60):
    rng = random.Random(seed)
    courses = [
        core("CS101", 12), core("CS102", 8), core("CS103", 0), core("CS104", 20),
        elective("EL201", 6, "Elective-1", 2), elective("EL202", 4, "Elective-1", 2),
        elective("EL203", 10, "Elective-1", 2), elective("EL204", 3, "Elective-1", 2),
        elective("EL301", 5, "Elective-2", 1), elective("EL302", 5, "Elective-2", 1),
        core("CS199", 5, status=Course.STATUS_INACTIVE),
    ]
    codes = [c.course_code for c in courses]
    students, preferences = [], []
    for i in range(n_students):
        roll_no = f"21CS{i:04d}"
        cgpa = None if i % 11 == 0 else round(rng.uniform(5.0, 10.0), 1)
        students.append(student(roll_no, cgpa))
        picks = rng.sample(codes, rng.randint(0, 7))
        preferences.extend(prefs(roll_no, *picks))
    students.append(student("21CS9999", 9.9, status="pending"))
    preferences.extend(prefs("21CS9999", "CS101"))
    return Roster(students=students, courses=courses, preferences=preferences)
