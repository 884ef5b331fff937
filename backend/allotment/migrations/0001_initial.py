import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("users", "0001_initial"),
        ("courses", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="AllotmentRun",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("superseded_at", models.DateTimeField(blank=True, null=True)),
                ("students_processed", models.PositiveIntegerField(default=0)),
                ("total_allotted", models.PositiveIntegerField(default=0)),
                ("total_waitlisted", models.PositiveIntegerField(default=0)),
                ("duration_ms", models.PositiveIntegerField(default=0)),
                ("warnings", models.JSONField(blank=True, default=list)),
                ("created_by", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="allotment_runs",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Allotment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("roll_no", models.CharField(max_length=32)),
                ("course_code", models.CharField(max_length=20)),
                ("outcome", models.CharField(
                    choices=[("ALLOTTED", "Allotted"), ("WAITLISTED", "Waitlisted")],
                    max_length=20,
                )),
                ("rank", models.PositiveIntegerField()),
                ("level", models.PositiveIntegerField()),
                ("reason", models.CharField(
                    blank=True,
                    choices=[("", "-"), ("course_full", "Course full"), ("quota_met", "Slot quota already met")],
                    default="",
                    max_length=20,
                )),
                ("course", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="allotments",
                    to="courses.course",
                )),
                ("run", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="allotments",
                    to="allotment.allotmentrun",
                )),
                ("student", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="allotments",
                    to="users.student",
                )),
            ],
            options={
                "ordering": ["run", "roll_no", "level"],
                "indexes": [
                    models.Index(fields=["run", "roll_no"], name="allotment_run_roll_idx"),
                    models.Index(fields=["run", "course_code"], name="allotment_run_course_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("run", "roll_no", "course_code"), name="unique_run_student_course"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AllotmentState",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("published", models.BooleanField(default=False)),
                ("published_at", models.DateTimeField(blank=True, null=True)),
                ("running", models.BooleanField(default=False)),
                ("lock_acquired_at", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("current_run", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="+",
                    to="allotment.allotmentrun",
                )),
            ],
            options={
                "verbose_name": "Allotment State",
                "verbose_name_plural": "Allotment State",
            },
        ),
    ]
