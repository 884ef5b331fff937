"""
Tests for the allotment algorithm.
"""
import threading
from collections import Counter, defaultdict

from django.test import SimpleTestCase

from allotment.eligibility import Choice, EligibleRoster, filter_roster
from allotment.engine import (
    ALLOTTED,
    REASON_COURSE_FULL,
    REASON_QUOTA_MET,
    WAITLISTED,
    compute_allotment,
    merit_key,
    merit_order,
)
from allotment.exceptions import AllotmentCancelled
from allotment.roster import Roster
from allotment.tests.helpers import core, elective, prefs, random_roster, student


def allot(roster, workers=1, core_first=True):
    return compute_allotment(filter_roster(roster, core_first=core_first), workers=workers)


def outcome_of(result, roll_no, course_code):
    for row in result.rows:
        if row.roll_no == roll_no and row.course_code == course_code:
            return row
    return None


class MeritOrderTestCase(SimpleTestCase):
    """Test cases for merit ordering."""

    def test_cgpa_descending_then_roll_no(self):
        students = [student("B", 8.0), student("C", 9.0), student("A", 8.0)]
        self.assertEqual([s.roll_no for s in merit_order(students)], ["C", "A", "B"])

    def test_missing_cgpa_sorts_last(self):
        students = [student("A"), student("B", 5.0)]
        self.assertEqual([s.roll_no for s in merit_order(students)], ["B", "A"])
        self.assertLess(merit_key(student("Z", 0.0)), merit_key(student("A")))


class ComputeAllotmentTestCase(SimpleTestCase):
    """Test cases for compute_allotment on small rosters."""

    def test_higher_cgpa_wins_single_seat(self):
        roster = Roster(
            students=[student("A", 9.0), student("B", 8.0)],
            courses=[core("CS101", 1)],
            preferences=prefs("A", "CS101") + prefs("B", "CS101"),
        )
        result = allot(roster)

        self.assertEqual(outcome_of(result, "A", "CS101").outcome, ALLOTTED)
        b = outcome_of(result, "B", "CS101")
        self.assertEqual(b.outcome, WAITLISTED)
        self.assertEqual(b.reason, REASON_COURSE_FULL)

    def test_rerun_after_cgpa_change_flips_result(self):
        roster = Roster(
            students=[student("A", 9.0), student("B", 9.5)],
            courses=[core("CS101", 1)],
            preferences=prefs("A", "CS101") + prefs("B", "CS101"),
        )
        result = allot(roster)

        self.assertEqual(outcome_of(result, "B", "CS101").outcome, ALLOTTED)
        self.assertEqual(outcome_of(result, "A", "CS101").outcome, WAITLISTED)

    def test_zero_capacity_choice_is_filtered_and_next_choice_taken_at_level_one(self):
        roster = Roster(
            students=[student("S1", 7.0)],
            courses=[elective("E1", 5, "Elective-1"), elective("E2", 0, "Elective-1")],
            preferences=prefs("S1", "E2", "E1"),
        )
        result = allot(roster)

        self.assertEqual(len(result.rows), 1)
        row = result.rows[0]
        self.assertEqual((row.course_code, row.outcome, row.rank, row.level), ("E1", ALLOTTED, 2, 1))
        self.assertTrue(any("E2" in w for w in result.warnings))

    def test_extra_slot_entries_are_dropped_before_allotment(self):
        roster = Roster(
            students=[student("S1", 7.0)],
            courses=[elective("E1", 5, "Elective-1"), elective("E2", 5, "Elective-1")],
            preferences=prefs("S1", "E1", "E2"),
        )
        result = allot(roster)

        self.assertEqual(outcome_of(result, "S1", "E1").outcome, ALLOTTED)
        self.assertIsNone(outcome_of(result, "S1", "E2"))
        self.assertTrue(any("E2" in w and "Elective-1" in w for w in result.warnings))

    def test_quota_met_choices_are_waitlisted(self):
        # a roster assembled by hand can list more slot entries than the quota
        eligible = EligibleRoster(
            students=[student("S1", 7.0)],
            capacities={"E1": 5, "E2": 5},
            choices={"S1": [
                Choice("E1", 1, "slot:Elective-1", 1, is_elective=True),
                Choice("E2", 2, "slot:Elective-1", 1, is_elective=True),
            ]},
        )
        result = compute_allotment(eligible)

        self.assertEqual(outcome_of(result, "S1", "E1").outcome, ALLOTTED)
        e2 = outcome_of(result, "S1", "E2")
        self.assertEqual((e2.outcome, e2.reason, e2.level), (WAITLISTED, REASON_QUOTA_MET, 2))
        self.assertEqual(result.total_allotted, 1)

    def test_waitlisted_student_competes_at_next_level(self):
        roster = Roster(
            students=[student("A", 9.0), student("B", 8.0)],
            courses=[elective("E1", 1, "Elective-1", 2), elective("E2", 5, "Elective-1", 2)],
            preferences=prefs("A", "E1", "E2") + prefs("B", "E1", "E2"),
        )
        result = allot(roster)

        self.assertEqual(outcome_of(result, "A", "E1").outcome, ALLOTTED)
        self.assertEqual(outcome_of(result, "A", "E2").outcome, ALLOTTED)
        b1 = outcome_of(result, "B", "E1")
        self.assertEqual((b1.outcome, b1.reason, b1.level), (WAITLISTED, REASON_COURSE_FULL, 1))
        b2 = outcome_of(result, "B", "E2")
        self.assertEqual((b2.outcome, b2.level), (ALLOTTED, 2))
        self.assertEqual(result.warnings, [])

    def test_first_choices_beat_second_choices(self):
        roster = Roster(
            students=[student("A", 9.0), student("B", 6.0)],
            courses=[core("C1", 1), core("C2", 1)],
            preferences=prefs("A", "C1", "C2") + prefs("B", "C2"),
        )
        result = allot(roster)

        self.assertEqual(outcome_of(result, "A", "C1").outcome, ALLOTTED)
        self.assertEqual(outcome_of(result, "B", "C2").outcome, ALLOTTED)
        self.assertEqual(outcome_of(result, "A", "C2").outcome, WAITLISTED)

    def test_multi_choice_slot_allows_up_to_max_choices(self):
        roster = Roster(
            students=[student("S1", 8.0)],
            courses=[
                elective("E1", 5, "Elective-1", 2),
                elective("E2", 5, "Elective-1", 2),
                elective("E3", 5, "Elective-1", 2),
            ],
            preferences=prefs("S1", "E1", "E2", "E3"),
        )
        result = allot(roster)

        # third entry is dropped by the filter, not waitlisted
        self.assertEqual([r.course_code for r in result.rows], ["E1", "E2"])
        self.assertEqual(result.total_allotted, 2)

    def test_core_entries_are_admitted_before_electives(self):
        roster = Roster(
            students=[student("S1", 8.0)],
            courses=[core("CS101", 5), elective("E1", 5, "Elective-1")],
            preferences=prefs("S1", "E1", "CS101"),
        )

        levels = {r.course_code: r.level for r in allot(roster).rows}
        self.assertEqual(levels, {"CS101": 1, "E1": 2})

        levels = {r.course_code: r.level for r in allot(roster, core_first=False).rows}
        self.assertEqual(levels, {"E1": 1, "CS101": 2})

    def test_students_without_choices_are_counted(self):
        roster = Roster(
            students=[student("A", 9.0), student("B", 8.0), student("C", 7.0, status="rejected")],
            courses=[core("CS101", 1)],
            preferences=prefs("A", "CS101"),
        )
        result = allot(roster)

        self.assertEqual(result.students_processed, 2)
        self.assertEqual(result.for_student("B"), [])

    def test_empty_roster(self):
        result = allot(Roster())
        self.assertEqual(result.rows, [])
        self.assertEqual(result.students_processed, 0)

    def test_cancel_before_first_level(self):
        roster = Roster(
            students=[student("A", 9.0)],
            courses=[core("CS101", 1)],
            preferences=prefs("A", "CS101"),
        )
        cancel = threading.Event()
        cancel.set()
        with self.assertRaises(AllotmentCancelled):
            compute_allotment(filter_roster(roster), cancel=cancel)


class AllotmentPropertiesTestCase(SimpleTestCase):
    """Invariants checked on a larger generated roster."""

    def setUp(self):
        self.roster = random_roster()
        self.eligible = filter_roster(self.roster)
        self.result = compute_allotment(self.eligible)

    def test_deterministic(self):
        again = compute_allotment(filter_roster(random_roster()))
        self.assertEqual(self.result.rows, again.rows)

    def test_thread_pool_matches_sequential(self):
        pooled = compute_allotment(filter_roster(self.roster), workers=4)
        self.assertEqual(self.result.rows, pooled.rows)

    def test_capacity_never_exceeded(self):
        allotted = Counter(r.course_code for r in self.result.rows if r.outcome == ALLOTTED)
        for code, count in allotted.items():
            self.assertLessEqual(count, self.eligible.capacities[code], code)

    def test_slot_quota_never_exceeded(self):
        limits = {c.elective_slot: c.max_choices for c in self.roster.courses if c.is_elective}
        slot_of = {c.course_code: c.elective_slot for c in self.roster.courses}
        per_student = Counter(
            (r.roll_no, slot_of[r.course_code])
            for r in self.result.rows
            if r.outcome == ALLOTTED and slot_of[r.course_code]
        )
        for (roll_no, slot), count in per_student.items():
            self.assertLessEqual(count, limits[slot], f"{roll_no} in {slot}")

    def test_every_cleaned_entry_has_one_row(self):
        expected = {
            (roll_no, choice.course_code)
            for roll_no, choices in self.eligible.choices.items()
            for choice in choices
        }
        produced = [(r.roll_no, r.course_code) for r in self.result.rows]
        self.assertEqual(len(produced), len(set(produced)))
        self.assertEqual(set(produced), expected)
        self.assertEqual(self.result.total_allotted + self.result.total_waitlisted, len(expected))

    def test_inactive_students_are_left_out(self):
        self.assertEqual(self.result.for_student("21CS9999"), [])
        self.assertEqual(self.result.students_processed, 60)

    def test_course_full_losers_rank_below_winners(self):
        merit = {s.roll_no: merit_key(s) for s in self.roster.students}
        by_course_level = defaultdict(lambda: {"in": [], "out": []})
        for r in self.result.rows:
            key = (r.course_code, r.level)
            if r.outcome == ALLOTTED:
                by_course_level[key]["in"].append(merit[r.roll_no])
            elif r.reason == REASON_COURSE_FULL:
                by_course_level[key]["out"].append(merit[r.roll_no])
        for key, groups in by_course_level.items():
            if groups["in"] and groups["out"]:
                self.assertLess(max(groups["in"]), min(groups["out"]), key)

    def test_rows_sorted_by_roll_no_then_level(self):
        keys = [(r.roll_no, r.level) for r in self.result.rows]
        self.assertEqual(keys, sorted(keys))
