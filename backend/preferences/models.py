from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Preference(models.Model):
    """
    One entry of a student's ranked course list. Rank 1 is the most wanted
    course; ranks are unique per student.
    """
    student = models.ForeignKey(
        'users.Student',
        on_delete=models.CASCADE,
        related_name='preferences',
    )
    course = models.ForeignKey(
        'courses.Course',
        on_delete=models.CASCADE,
        related_name='preferences',
    )
    rank = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="1 = highest priority"
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'preferences'
        ordering = ['student', 'rank']
        verbose_name = 'Preference'
        verbose_name_plural = 'Preferences'
        constraints = [
            models.UniqueConstraint(fields=['student', 'rank'], name='unique_student_rank'),
            models.UniqueConstraint(fields=['student', 'course'], name='unique_student_course'),
        ]

    def __str__(self):
        return f"{self.student.roll_no} #{self.rank}: {self.course.course_code}"
