#allotment/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone


class AllotmentRun(models.Model):
    """
    One complete execution of the allotment algorithm. Written once inside a
    single transaction and never modified afterwards, except for the
    ``superseded_at`` stamp when a newer run replaces it.
    """
    created_at = models.DateTimeField(default=timezone.now)
    completed_at = models.DateTimeField(null=True, blank=True)
    superseded_at = models.DateTimeField(null=True, blank=True)
    students_processed = models.PositiveIntegerField(default=0)
    total_allotted = models.PositiveIntegerField(default=0)
    total_waitlisted = models.PositiveIntegerField(default=0)
    duration_ms = models.PositiveIntegerField(default=0)
    warnings = models.JSONField(default=list, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="allotment_runs",
    )

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Run #{self.pk} @ {self.created_at:%Y-%m-%d %H:%M}"

    @property
    def is_superseded(self):
        return self.superseded_at is not None

    def summary(self):
        return {
            "students_processed": self.students_processed,
            "total_allotted": self.total_allotted,
            "total_waitlisted": self.total_waitlisted,
            "timestamp": (self.completed_at or self.created_at).isoformat(),
        }


class Allotment(models.Model):
    """
    Outcome of one (student, course) preference entry within a run. Roll
    number and course code are stored as written so the run stays readable
    after the student or course rows change.
    """
    ALLOTTED = "ALLOTTED"
    WAITLISTED = "WAITLISTED"
    OUTCOME_CHOICES = [
        (ALLOTTED, "Allotted"),
        (WAITLISTED, "Waitlisted"),
    ]
    REASON_CHOICES = [
        ("", "-"),
        ("course_full", "Course full"),
        ("quota_met", "Slot quota already met"),
    ]

    run = models.ForeignKey(
        AllotmentRun,
        on_delete=models.CASCADE,
        related_name="allotments",
    )
    roll_no = models.CharField(max_length=32)
    course_code = models.CharField(max_length=20)
    student = models.ForeignKey(
        "users.Student",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="allotments",
    )
    course = models.ForeignKey(
        "courses.Course",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="allotments",
    )
    outcome = models.CharField(max_length=20, choices=OUTCOME_CHOICES)
    rank = models.PositiveIntegerField()
    level = models.PositiveIntegerField()
    reason = models.CharField(max_length=20, choices=REASON_CHOICES, blank=True, default="")

    class Meta:
        ordering = ["run", "roll_no", "level"]
        constraints = [
            models.UniqueConstraint(fields=["run", "roll_no", "course_code"], name="unique_run_student_course"),
        ]
        indexes = [
            models.Index(fields=["run", "roll_no"], name="allotment_run_roll_idx"),
            models.Index(fields=["run", "course_code"], name="allotment_run_course_idx"),
        ]

    def __str__(self):
        return f"{self.roll_no} → {self.course_code}: {self.outcome}"


class AllotmentState(models.Model):
    """
    Singleton row (pk=1). ``current_run`` is the pointer student and admin
    reads follow; ``published`` gates student visibility; ``running`` is the
    system-wide run lock.
    """
    SINGLETON_PK = 1

    current_run = models.ForeignKey(
        AllotmentRun,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    published = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True)
    running = models.BooleanField(default=False)
    lock_acquired_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Allotment State"
        verbose_name_plural = "Allotment State"

    def __str__(self):
        run = f"run #{self.current_run_id}" if self.current_run_id else "no run"
        return f"{run}, {'published' if self.published else 'unpublished'}"

    @classmethod
    def load(cls):
        state, _ = cls.objects.get_or_create(pk=cls.SINGLETON_PK)
        return state
