import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ElectiveSlot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Slot name shared by its courses (e.g., Elective-1)", max_length=50, unique=True)),
                ("max_choices", models.PositiveIntegerField(
                    default=1,
                    help_text="How many courses a student may select from this slot",
                    validators=[django.core.validators.MinValueValidator(1)],
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Elective Slot",
                "verbose_name_plural": "Elective Slots",
                "db_table": "elective_slots",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Course",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("course_code", models.CharField(help_text="Unique course code (e.g., CS101)", max_length=20, unique=True)),
                ("course_name", models.CharField(help_text="Full name of the course", max_length=255)),
                ("credits", models.PositiveIntegerField(default=3)),
                ("faculty", models.CharField(blank=True, default="TBA", max_length=255)),
                ("timetable_slot", models.CharField(
                    blank=True,
                    default="TBA",
                    help_text="Timetable slot label shown to students (not the elective slot)",
                    max_length=50,
                )),
                ("capacity", models.IntegerField(
                    default=30,
                    help_text="Number of seats; 0 means the course is not offered for allotment",
                    validators=[django.core.validators.MinValueValidator(0)],
                )),
                ("course_type", models.CharField(
                    choices=[("core", "Core (Mandatory)"), ("elective", "Elective (Optional)")],
                    default="core",
                    max_length=20,
                )),
                ("semester", models.PositiveIntegerField(blank=True, null=True)),
                ("status", models.CharField(
                    choices=[("active", "Active"), ("inactive", "Inactive")],
                    default="active",
                    max_length=20,
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("elective_slot", models.ForeignKey(
                    blank=True,
                    help_text="Required for electives, empty for core courses",
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="courses",
                    to="courses.electiveslot",
                )),
            ],
            options={
                "verbose_name": "Course",
                "verbose_name_plural": "Courses",
                "db_table": "courses",
                "ordering": ["course_code"],
                "indexes": [
                    models.Index(fields=["status"], name="courses_status_idx"),
                    models.Index(fields=["course_type"], name="courses_type_idx"),
                ],
            },
        ),
    ]
