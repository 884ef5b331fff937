#allotment/engine.py
"""
Seat allotment algorithm.

Seats are handed out one preference level at a time across the whole cohort:
every student's first surviving choice is considered before anyone's second
choice. Within a level each course admits its candidates in merit order
(CGPA high to low, missing CGPA last, roll number as the final tiebreak)
until its seats run out. Admissions for different courses at the same level
are independent, so they may be computed on a thread pool; the per-student
quota bookkeeping is applied afterwards on the calling thread, one course at
a time in course-code order.

A student stays in the running for a category (an elective slot, or a single
core course) until its quota is filled. An entry that loses out because the
course is full is WAITLISTED, and the student competes again at the next
level with their next choice.
"""
from __future__ import annotations

from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
import logging

from .eligibility import Choice, EligibleRoster
from .exceptions import AllotmentCancelled
from .roster import StudentRecord

logger = logging.getLogger(__name__)

ALLOTTED = "ALLOTTED"
WAITLISTED = "WAITLISTED"

REASON_COURSE_FULL = "course_full"
REASON_QUOTA_MET = "quota_met"


@dataclass(frozen=True)
class AllotmentRow:
    roll_no: str
    course_code: str
    outcome: str
    rank: int
    level: int
    reason: str = ""


@dataclass
class AllotmentOutcome:
    rows: List[AllotmentRow] = field(default_factory=list)
    students_processed: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def total_allotted(self) -> int:
        return sum(1 for r in self.rows if r.outcome == ALLOTTED)

    @property
    def total_waitlisted(self) -> int:
        return sum(1 for r in self.rows if r.outcome == WAITLISTED)

    def for_student(self, roll_no: str) -> List[AllotmentRow]:
        return [r for r in self.rows if r.roll_no == roll_no]

    def for_course(self, course_code: str) -> List[AllotmentRow]:
        return [r for r in self.rows if r.course_code == course_code]


def merit_key(student: StudentRecord) -> Tuple[bool, Decimal, str]:
    cgpa = student.cgpa
    if cgpa is None:
        return (True, Decimal(0), student.roll_no)
    return (False, -Decimal(cgpa), student.roll_no)


def merit_order(students: List[StudentRecord]) -> List[StudentRecord]:
    return sorted(students, key=merit_key)


Candidate = Tuple[str, Choice]


def _admit(course_code: str, candidates: List[Candidate], seats: int):
    """Candidates arrive in merit order; the first ``seats`` of them get in."""
    seats = max(seats, 0)
    return course_code, candidates[:seats], candidates[seats:]


def compute_allotment(
    eligible: EligibleRoster,
    workers: int = 1,
    cancel=None,
) -> AllotmentOutcome:
    """Allot seats for a filtered roster.

    ``cancel`` is an optional ``threading.Event``; it is checked before each
    level and raises ``AllotmentCancelled`` once set.
    """
    order = merit_order(eligible.students)
    remaining: Dict[str, int] = dict(eligible.capacities)
    quota_used: Dict[Tuple[str, str], int] = defaultdict(int)
    resolved: Dict[Tuple[str, str], AllotmentRow] = {}

    executor: Optional[ThreadPoolExecutor] = None
    if workers > 1:
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="allotment")

    try:
        for level in range(1, eligible.longest_list + 1):
            if cancel is not None and cancel.is_set():
                raise AllotmentCancelled()

            pending: Dict[str, List[Candidate]] = defaultdict(list)
            for student in order:
                choices = eligible.choices.get(student.roll_no, [])
                if level > len(choices):
                    continue
                choice = choices[level - 1]
                # filter_roster already caps slot entries; this covers hand-built rosters
                if quota_used[(student.roll_no, choice.category)] >= choice.quota:
                    resolved[(student.roll_no, choice.course_code)] = AllotmentRow(
                        roll_no=student.roll_no,
                        course_code=choice.course_code,
                        outcome=WAITLISTED,
                        rank=choice.rank,
                        level=level,
                        reason=REASON_QUOTA_MET,
                    )
                    continue
                pending[choice.course_code].append((student.roll_no, choice))

            codes = sorted(pending)
            candidate_lists = [pending[code] for code in codes]
            seats = [remaining.get(code, 0) for code in codes]
            if executor is not None:
                results = list(executor.map(_admit, codes, candidate_lists, seats))
            else:
                results = [_admit(*job) for job in zip(codes, candidate_lists, seats)]

            # barrier: quota and seat bookkeeping happen here, sequentially
            admitted_total = 0
            for course_code, admitted, rejected in results:
                remaining[course_code] = remaining.get(course_code, 0) - len(admitted)
                admitted_total += len(admitted)
                for roll_no, choice in admitted:
                    quota_used[(roll_no, choice.category)] += 1
                    resolved[(roll_no, course_code)] = AllotmentRow(
                        roll_no=roll_no,
                        course_code=course_code,
                        outcome=ALLOTTED,
                        rank=choice.rank,
                        level=level,
                    )
                for roll_no, choice in rejected:
                    resolved[(roll_no, course_code)] = AllotmentRow(
                        roll_no=roll_no,
                        course_code=course_code,
                        outcome=WAITLISTED,
                        rank=choice.rank,
                        level=level,
                        reason=REASON_COURSE_FULL,
                    )

            logger.debug(
                "Level %d: %d candidate(s) across %d course(s), %d admitted",
                level, sum(len(c) for c in candidate_lists), len(codes), admitted_total,
            )
    finally:
        if executor is not None:
            executor.shutdown(wait=True)

    rows: List[AllotmentRow] = []
    for student in eligible.students:
        for level, choice in enumerate(eligible.choices.get(student.roll_no, []), start=1):
            row = resolved.get((student.roll_no, choice.course_code))
            if row is None:
                row = AllotmentRow(student.roll_no, choice.course_code, WAITLISTED, choice.rank, level)
            rows.append(row)
    rows.sort(key=lambda r: (r.roll_no, r.level))

    return AllotmentOutcome(
        rows=rows,
        students_processed=len(eligible.students),
        warnings=list(eligible.warnings),
    )
