from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from rich.console import Console
from rich.table import Table

from allotment import services
from allotment.engine import ALLOTTED
from allotment.exceptions import AllotmentError

User = get_user_model()


class Command(BaseCommand):
    help = 'Run the seat allotment (replaces the current run; results start unpublished)'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.console = Console()

    def add_arguments(self, parser):
        parser.add_argument('--publish', action='store_true', help='Publish the results once the run is saved')
        parser.add_argument('--dry-run', action='store_true', help='Compute and print the outcome without saving it')
        parser.add_argument('--workers', type=int, default=None, help='Threads for per-course admission')
        parser.add_argument('--user', type=str, default=None, help='Username recorded as the run author')

    def handle(self, *args, **options):
        if options['dry_run'] and options['publish']:
            raise CommandError('--dry-run and --publish cannot be combined')
        workers = options['workers']
        if workers is not None and workers < 1:
            raise CommandError('--workers must be at least 1')

        actor = None
        if options['user']:
            actor = User.objects.filter(username=options['user']).first()
            if actor is None:
                raise CommandError(f'User "{options["user"]}" does not exist')

        try:
            if options['dry_run']:
                outcome = services.compute_outcome(workers=workers)
                self._print_rows(outcome.rows)
                self._print_summary(outcome.students_processed, outcome.total_allotted,
                                    outcome.total_waitlisted, outcome.warnings)
                self.console.print("[yellow]Dry run: nothing was saved[/yellow]")
                return

            run = services.run_allotment(actor=actor, workers=workers)
            self._print_summary(run.students_processed, run.total_allotted,
                                run.total_waitlisted, run.warnings)
            self.console.print(f"[green]✓ Run #{run.pk} saved and made current[/green]")

            if options['publish']:
                services.publish(actor=actor)
                self.console.print("[green]✓ Results published[/green]")
            else:
                self.console.print("[cyan]Results are unpublished; publish them when ready[/cyan]")
        except AllotmentError as e:
            for problem in getattr(e, 'problems', []):
                self.console.print(f"[red]  - {problem}[/red]")
            raise CommandError(str(e))

    def _print_rows(self, rows):
        table = Table(title="Allotment (dry run)")
        table.add_column("Roll No", style="cyan")
        table.add_column("Course")
        table.add_column("Rank", justify="right")
        table.add_column("Level", justify="right")
        table.add_column("Outcome")
        table.add_column("Reason")
        for row in rows:
            colour = "green" if row.outcome == ALLOTTED else "yellow"
            table.add_row(row.roll_no, row.course_code, str(row.rank), str(row.level),
                          f"[{colour}]{row.outcome}[/{colour}]", row.reason or "-")
        self.console.print(table)

    def _print_summary(self, processed, allotted, waitlisted, warnings):
        table = Table(title="Allotment summary", show_header=False)
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")
        table.add_row("Students processed", str(processed))
        table.add_row("Allotted", str(allotted))
        table.add_row("Waitlisted", str(waitlisted))
        table.add_row("Warnings", str(len(warnings)))
        self.console.print(table)
        for warning in warnings:
            self.console.print(f"[yellow]! {warning}[/yellow]")
