#allotment/eligibility.py
"""
Eligibility filter.

Turns a raw roster into the per-student ordered choice lists the engine
admits against. Malformed data (negative capacity, broken ranks, elective
slots that do not add up) aborts with ``AllotmentConfigError`` before any
seat is handed out. Entries that are merely unusable (inactive course, zero
capacity, more picks than a slot allows, inactive student) are dropped and
reported as warnings; the run goes ahead with what is left.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List

from .exceptions import AllotmentConfigError
from .roster import CourseRecord, PreferenceRecord, Roster, StudentRecord


@dataclass(frozen=True)
class Choice:
    """A preference entry that survived filtering.

    ``category`` groups entries that share one quota: every course of an
    elective slot shares the slot's ``max_choices``; a core course is its own
    category with a quota of one.
    """
    course_code: str
    rank: int
    category: str
    quota: int
    is_elective: bool = False


@dataclass
class EligibleRoster:
    students: List[StudentRecord] = field(default_factory=list)
    capacities: Dict[str, int] = field(default_factory=dict)
    choices: Dict[str, List[Choice]] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @property
    def longest_list(self) -> int:
        return max((len(c) for c in self.choices.values()), default=0)


def category_for(course: CourseRecord) -> str:
    if course.is_elective:
        return f"slot:{course.elective_slot}"
    return f"core:{course.course_code}"


def validate_roster(roster: Roster) -> None:
    """Collect every configuration problem and raise them together."""
    problems: List[str] = []
    slot_limits: Dict[str, int] = {}
    seen_codes = set()

    for course in roster.courses:
        if course.course_code in seen_codes:
            problems.append(f"course {course.course_code} is listed twice")
        seen_codes.add(course.course_code)

        if not course.is_active:
            continue
        if course.capacity is None or course.capacity < 0:
            problems.append(f"course {course.course_code} has negative capacity ({course.capacity})")
        if course.is_elective:
            if not course.elective_slot:
                problems.append(f"elective course {course.course_code} has no elective slot")
                continue
            if course.max_choices is None or course.max_choices < 1:
                problems.append(
                    f"elective slot {course.elective_slot} must allow at least one choice "
                    f"(course {course.course_code} has {course.max_choices})"
                )
                continue
            known = slot_limits.setdefault(course.elective_slot, course.max_choices)
            if known != course.max_choices:
                problems.append(
                    f"elective slot {course.elective_slot} has conflicting max_choices ({known} vs {course.max_choices})"
                )
        elif course.elective_slot:
            problems.append(f"core course {course.course_code} cannot belong to elective slot {course.elective_slot}")

    active = {s.roll_no for s in roster.students if s.is_active}
    ranks_by_student: Dict[str, set] = defaultdict(set)
    courses_by_student: Dict[str, set] = defaultdict(set)
    for pref in roster.preferences:
        if pref.roll_no not in active:
            continue
        if pref.rank is None or pref.rank < 1:
            problems.append(f"student {pref.roll_no} has invalid rank {pref.rank} for {pref.course_code}")
            continue
        if pref.rank in ranks_by_student[pref.roll_no]:
            problems.append(f"student {pref.roll_no} uses rank {pref.rank} more than once")
        ranks_by_student[pref.roll_no].add(pref.rank)
        if pref.course_code in courses_by_student[pref.roll_no]:
            problems.append(f"student {pref.roll_no} ranks {pref.course_code} more than once")
        courses_by_student[pref.roll_no].add(pref.course_code)

    if problems:
        raise AllotmentConfigError(problems=problems)


def filter_roster(roster: Roster, core_first: bool = True) -> EligibleRoster:
    validate_roster(roster)

    courses = {c.course_code: c for c in roster.courses}
    students = sorted((s for s in roster.students if s.is_active), key=lambda s: s.roll_no)
    active = {s.roll_no for s in students}
    warnings: List[str] = []

    by_student: Dict[str, List[PreferenceRecord]] = defaultdict(list)
    for pref in roster.preferences:
        by_student[pref.roll_no].append(pref)

    for roll_no in sorted(set(by_student) - active):
        warnings.append(
            f"skipped {len(by_student[roll_no])} preference(s) of {roll_no}: student is not active"
        )

    choices: Dict[str, List[Choice]] = {}
    for student in students:
        kept: List[Choice] = []
        per_slot: Dict[str, int] = defaultdict(int)
        for pref in sorted(by_student.get(student.roll_no, []), key=lambda p: p.rank):
            course = courses.get(pref.course_code)
            if course is None:
                warnings.append(f"{student.roll_no}: dropped rank {pref.rank}, course {pref.course_code} does not exist")
                continue
            if not course.is_active:
                warnings.append(f"{student.roll_no}: dropped rank {pref.rank}, course {pref.course_code} is inactive")
                continue
            if course.capacity == 0:
                warnings.append(f"{student.roll_no}: dropped rank {pref.rank}, course {pref.course_code} has no seats")
                continue
            if course.is_elective:
                if per_slot[course.elective_slot] >= course.max_choices:
                    warnings.append(
                        f"{student.roll_no}: dropped rank {pref.rank} ({pref.course_code}), "
                        f"slot {course.elective_slot} allows only {course.max_choices} choice(s)"
                    )
                    continue
                per_slot[course.elective_slot] += 1
            kept.append(Choice(
                course_code=course.course_code,
                rank=pref.rank,
                category=category_for(course),
                quota=course.max_choices if course.is_elective else 1,
                is_elective=course.is_elective,
            ))

        if core_first:
            # stable: each group keeps its rank order
            kept.sort(key=lambda c: c.is_elective)
        choices[student.roll_no] = kept

    capacities = {
        code: course.capacity
        for code, course in courses.items()
        if course.is_active and course.capacity > 0
    }
    return EligibleRoster(students=students, capacities=capacities, choices=choices, warnings=warnings)
