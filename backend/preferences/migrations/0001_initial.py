import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("users", "0001_initial"),
        ("courses", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Preference",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("rank", models.PositiveIntegerField(
                    help_text="1 = highest priority",
                    validators=[django.core.validators.MinValueValidator(1)],
                )),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("course", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="preferences",
                    to="courses.course",
                )),
                ("student", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="preferences",
                    to="users.student",
                )),
            ],
            options={
                "verbose_name": "Preference",
                "verbose_name_plural": "Preferences",
                "db_table": "preferences",
                "ordering": ["student", "rank"],
                "constraints": [
                    models.UniqueConstraint(fields=("student", "rank"), name="unique_student_rank"),
                    models.UniqueConstraint(fields=("student", "course"), name="unique_student_course"),
                ],
            },
        ),
    ]
