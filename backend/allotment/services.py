#allotment/services.py
"""
Run materialization and result publication.

A run is computed in memory, then written in one transaction that also swaps
``AllotmentState.current_run`` to the new run and resets ``published``.
Readers always follow ``current_run``, so they see either the previous
complete run or the new complete run. Only one run may be in flight; the
lock is a conditional UPDATE on the state row so it holds across processes.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Dict, Optional
import logging
import time

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from courses.models import Course
from users.models import Student
from .eligibility import filter_roster
from .engine import AllotmentOutcome, compute_allotment
from .exceptions import (
    AllotmentCancelled,
    AllotmentError,
    AllotmentInProgress,
    AllotmentStorageError,
    NoAllotmentRun,
)
from .models import Allotment, AllotmentRun, AllotmentState
from .roster import load_roster

logger = logging.getLogger(__name__)


def _state_qs():
    return AllotmentState.objects.filter(pk=AllotmentState.SINGLETON_PK)


def _lock_free_q():
    stale_before = timezone.now() - timedelta(seconds=settings.ALLOTMENT_LOCK_TIMEOUT)
    return Q(running=False) | Q(lock_acquired_at__lt=stale_before)


# ---- run lock ----------------------------------------------------------------

def acquire_run_lock():
    """Take the system-wide run lock or raise ``AllotmentInProgress``.

    Returns the acquisition timestamp, which ``release_run_lock`` uses so a
    holder whose lock went stale and was taken over cannot release the new
    holder's lock.
    """
    AllotmentState.load()
    token = timezone.now()
    acquired = _state_qs().filter(_lock_free_q()).update(
        running=True, lock_acquired_at=token, updated_at=token,
    )
    if not acquired:
        logger.warning("Allotment run rejected: another run holds the lock")
        raise AllotmentInProgress()
    return token


def release_run_lock(token):
    _state_qs().filter(running=True, lock_acquired_at=token).update(
        running=False, lock_acquired_at=None, updated_at=timezone.now(),
    )


def is_running():
    return _state_qs().filter(running=True).exclude(_lock_free_q()).exists()


# ---- run -----------------------------------------------------------------------

def compute_outcome(workers: Optional[int] = None, cancel=None) -> AllotmentOutcome:
    """Load, filter and allot without writing anything."""
    try:
        roster = load_roster()
    except DatabaseError as exc:
        logger.exception("Roster could not be read")
        raise AllotmentStorageError("Could not read courses and preferences; please retry.") from exc
    eligible = filter_roster(roster, core_first=settings.ALLOTMENT_CORE_FIRST)
    return compute_allotment(
        eligible,
        workers=workers or settings.ALLOTMENT_WORKERS,
        cancel=cancel,
    )


def _materialize(outcome: AllotmentOutcome, actor, started: float, token) -> AllotmentRun:
    roll_nos = {r.roll_no for r in outcome.rows}
    try:
        student_ids = dict(Student.objects.filter(roll_no__in=roll_nos).values_list("roll_no", "id"))
        course_ids = dict(Course.objects.values_list("course_code", "id"))
        with transaction.atomic():
            # the lock may have gone stale and been taken over while computing
            state = (_state_qs()
                     .filter(running=True, lock_acquired_at=token)
                     .select_for_update()
                     .first())
            if state is None:
                raise AllotmentInProgress(
                    "The run lock was taken over by another run; this result was discarded."
                )
            now = timezone.now()
            run = AllotmentRun.objects.create(
                created_at=now,
                completed_at=now,
                students_processed=outcome.students_processed,
                total_allotted=outcome.total_allotted,
                total_waitlisted=outcome.total_waitlisted,
                duration_ms=int((time.monotonic() - started) * 1000),
                warnings=outcome.warnings,
                created_by=actor if getattr(actor, "pk", None) else None,
            )
            Allotment.objects.bulk_create(
                [
                    Allotment(
                        run=run,
                        roll_no=r.roll_no,
                        course_code=r.course_code,
                        student_id=student_ids.get(r.roll_no),
                        course_id=course_ids.get(r.course_code),
                        outcome=r.outcome,
                        rank=r.rank,
                        level=r.level,
                        reason=r.reason,
                    )
                    for r in outcome.rows
                ],
                batch_size=1000,
            )
            (AllotmentRun.objects
             .filter(superseded_at__isnull=True)
             .exclude(pk=run.pk)
             .update(superseded_at=now))
            state.current_run = run
            state.published = False
            state.published_at = None
            state.save(update_fields=["current_run", "published", "published_at", "updated_at"])
    except DatabaseError as exc:
        logger.exception("Allotment run could not be saved; previous run stays current")
        raise AllotmentStorageError() from exc
    return run


def run_allotment(actor=None, cancel=None, workers: Optional[int] = None) -> AllotmentRun:
    """Clear-and-replace allotment run. Returns the new current run.

    ``cancel`` (a ``threading.Event``) is honoured up to the moment the
    result starts being written; after that the run always completes.
    """
    token = acquire_run_lock()
    started = time.monotonic()
    logger.info("Allotment run started by %s", getattr(actor, "username", None) or "system")
    try:
        outcome = compute_outcome(workers=workers, cancel=cancel)
        if cancel is not None and cancel.is_set():
            raise AllotmentCancelled()
        run = _materialize(outcome, actor, started, token)
    except AllotmentError as exc:
        logger.warning("Allotment run failed: %s", exc)
        raise
    finally:
        release_run_lock(token)

    logger.info(
        "Allotment run #%s done: %d student(s), %d allotted, %d waitlisted, %d warning(s) in %d ms",
        run.pk, run.students_processed, run.total_allotted, run.total_waitlisted,
        len(run.warnings), run.duration_ms,
    )
    return run


# ---- publication gate ------------------------------------------------------------

def _set_published(flag: bool, actor=None) -> bool:
    AllotmentState.load()
    now = timezone.now()
    updated = (_state_qs()
               .filter(_lock_free_q(), current_run__isnull=False)
               .update(published=flag, published_at=now if flag else None, updated_at=now))
    if not updated:
        if is_running():
            raise AllotmentInProgress(
                "An allotment run is in progress; publication can change once it finishes."
            )
        if flag:
            raise NoAllotmentRun("Nothing to publish: run the allotment first.")
        raise NoAllotmentRun()
    logger.info(
        "Allotment results %s by %s",
        "published" if flag else "unpublished",
        getattr(actor, "username", None) or "system",
    )
    return flag


def publish(actor=None) -> bool:
    return _set_published(True, actor)


def unpublish(actor=None) -> bool:
    return _set_published(False, actor)


def publication_status() -> Dict[str, bool]:
    state = AllotmentState.load()
    return {"published": bool(state.published and state.current_run_id)}


# ---- read paths ----------------------------------------------------------------

def current_run() -> Optional[AllotmentRun]:
    """Admin view of the current run, published or not."""
    state = AllotmentState.objects.select_related("current_run").filter(
        pk=AllotmentState.SINGLETON_PK
    ).first()
    return state.current_run if state else None


def published_run() -> Optional[AllotmentRun]:
    state = AllotmentState.objects.select_related("current_run").filter(
        pk=AllotmentState.SINGLETON_PK
    ).first()
    if state and state.published and state.current_run_id:
        return state.current_run
    return None


def current_run_detail(roll_no: Optional[str] = None, course_code: Optional[str] = None):
    """Current run summary, filter warnings and rows, published or not."""
    run = current_run()
    if run is None:
        return None
    rows = Allotment.objects.filter(run=run).select_related("course")
    if roll_no:
        rows = rows.filter(roll_no__iexact=roll_no.strip())
    if course_code:
        rows = rows.filter(course_code__iexact=course_code.strip())
    return {
        "run": run,
        "result": run.summary(),
        "published": publication_status()["published"],
        "warnings": list(run.warnings or []),
        "rows": rows,
    }


def _result_item(row: Allotment, run: AllotmentRun):
    course = row.course
    return {
        "course_id": row.course_code,
        "course_name": course.course_name if course else row.course_code,
        "credits": course.credits if course else 0,
        "status": row.outcome.lower(),
        "rank": row.rank,
        "enrollment_date": (run.completed_at or run.created_at).isoformat(),
    }


def student_result(student: Student):
    """Results for one student; empty until the current run is published."""
    run = published_run()
    if run is None:
        return {"allotted": [], "waitlisted": [], "published": False}

    rows = (Allotment.objects
            .filter(run=run, roll_no=student.roll_no)
            .select_related("course")
            .order_by("rank"))
    allotted, waitlisted = [], []
    for row in rows:
        item = _result_item(row, run)
        (allotted if row.outcome == Allotment.ALLOTTED else waitlisted).append(item)
    return {"allotted": allotted, "waitlisted": waitlisted, "published": True}


def seat_counts(run: Optional[AllotmentRun]) -> Dict[str, int]:
    """course_code -> seats allotted in ``run``."""
    if run is None:
        return {}
    return dict(
        Allotment.objects
        .filter(run=run, outcome=Allotment.ALLOTTED)
        .order_by()
        .values("course_code")
        .annotate(n=Count("id"))
        .values_list("course_code", "n")
    )


def course_roster(course: Course, run: Optional[AllotmentRun]):
    students = []
    allotted = waitlisted = 0
    if run is not None:
        rows = (Allotment.objects
                .filter(run=run, course_code=course.course_code)
                .select_related("student", "student__user")
                .order_by("outcome", "level", "roll_no"))
        for row in rows:
            profile = row.student
            if row.outcome == Allotment.ALLOTTED:
                allotted += 1
            else:
                waitlisted += 1
            students.append({
                "roll_no": row.roll_no,
                "name": profile.user.get_full_name() if profile else "",
                "email": (profile.user.email or "") if profile else "",
                "cgpa": float(profile.cgpa) if profile and profile.cgpa is not None else None,
                "status": profile.status if profile else "",
                "enrollment_status": row.outcome.lower(),
                "enrollment_date": (run.completed_at or run.created_at).isoformat(),
                "rank": row.rank,
            })
    return {
        "course_id": course.course_code,
        "total_enrolled": allotted + waitlisted,
        "allotted": allotted,
        "waitlisted": waitlisted,
        "students": students,
    }


def dashboard_stats():
    run = current_run()
    active_courses = Course.objects.filter(status=Course.STATUS_ACTIVE)
    total_capacity = active_courses.aggregate(total=Sum("capacity"))["total"] or 0
    seats_allotted = run.total_allotted if run else 0
    return {
        "total_students": Student.objects.filter(status=Student.STATUS_ACTIVE).count(),
        "pending_approvals": Student.objects.filter(status=Student.STATUS_PENDING).count(),
        "total_courses": active_courses.count(),
        "total_capacity": total_capacity,
        "seats_allotted": seats_allotted,
        "seats_waitlisted": run.total_waitlisted if run else 0,
        "utilization_percent": round(seats_allotted * 100.0 / total_capacity, 1) if total_capacity else 0.0,
    }
