#courses/models.py
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class ElectiveSlot(models.Model):
    """
    A named group of elective courses (e.g., "Elective-1"). A student may rank,
    and be allotted, at most ``max_choices`` courses from one slot.
    """
    name = models.CharField(
        max_length=50,
        unique=True,
        help_text="Slot name shared by its courses (e.g., Elective-1)"
    )
    max_choices = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        help_text="How many courses a student may select from this slot"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'elective_slots'
        ordering = ['name']
        verbose_name = 'Elective Slot'
        verbose_name_plural = 'Elective Slots'

    def __str__(self):
        return f"{self.name} (max {self.max_choices})"

    def clean(self):
        if self.name:
            self.name = self.name.strip()


class Course(models.Model):
    """
    A course offering with a fixed number of seats.
    """

    TYPE_CORE = 'core'
    TYPE_ELECTIVE = 'elective'
    TYPE_CHOICES = [
        (TYPE_CORE, 'Core (Mandatory)'),
        (TYPE_ELECTIVE, 'Elective (Optional)'),
    ]

    STATUS_ACTIVE = 'active'
    STATUS_INACTIVE = 'inactive'
    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_INACTIVE, 'Inactive'),
    ]

    course_code = models.CharField(
        max_length=20,
        unique=True,
        help_text="Unique course code (e.g., CS101)"
    )
    course_name = models.CharField(
        max_length=255,
        help_text="Full name of the course"
    )
    credits = models.PositiveIntegerField(default=3)
    faculty = models.CharField(max_length=255, blank=True, default='TBA')
    timetable_slot = models.CharField(
        max_length=50,
        blank=True,
        default='TBA',
        help_text="Timetable slot label shown to students (not the elective slot)"
    )
    capacity = models.IntegerField(
        default=30,
        validators=[MinValueValidator(0)],
        help_text="Number of seats; 0 means the course is not offered for allotment"
    )
    course_type = models.CharField(
        max_length=20,
        choices=TYPE_CHOICES,
        default=TYPE_CORE,
    )
    elective_slot = models.ForeignKey(
        ElectiveSlot,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='courses',
        help_text="Required for electives, empty for core courses"
    )
    semester = models.PositiveIntegerField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_ACTIVE,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'courses'
        ordering = ['course_code']
        verbose_name = 'Course'
        verbose_name_plural = 'Courses'
        indexes = [
            models.Index(fields=['status'], name='courses_status_idx'),
            models.Index(fields=['course_type'], name='courses_type_idx'),
        ]

    def __str__(self):
        return f"{self.course_code} - {self.course_name}"

    def clean(self):
        if self.course_code:
            self.course_code = self.course_code.upper().strip()
        if self.course_type == self.TYPE_ELECTIVE and not self.elective_slot_id:
            raise ValidationError({'elective_slot': "Elective slot is required for elective courses."})
        if self.course_type == self.TYPE_CORE and self.elective_slot_id:
            raise ValidationError({'elective_slot': "Core courses cannot belong to an elective slot."})

    @property
    def is_elective(self):
        return self.course_type == self.TYPE_ELECTIVE

    @property
    def max_choices(self):
        return self.elective_slot.max_choices if self.elective_slot_id else None
