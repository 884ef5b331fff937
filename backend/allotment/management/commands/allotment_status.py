from django.core.management.base import BaseCommand
from rich.console import Console
from rich.table import Table

from allotment import services


class Command(BaseCommand):
    help = 'Show the current allotment run and whether it is published'

    def handle(self, *args, **options):
        console = Console()
        run = services.current_run()
        if run is None:
            console.print("[yellow]No allotment run yet[/yellow]")
            return

        published = services.publication_status()['published']
        table = Table(title=f"Current run #{run.pk}", show_header=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")
        table.add_row("Completed", run.summary()['timestamp'])
        table.add_row("Run by", run.created_by.username if run.created_by else "system")
        table.add_row("Students processed", str(run.students_processed))
        table.add_row("Allotted", str(run.total_allotted))
        table.add_row("Waitlisted", str(run.total_waitlisted))
        table.add_row("Warnings", str(len(run.warnings)))
        table.add_row("Duration", f"{run.duration_ms} ms")
        table.add_row("Published", "[green]yes[/green]" if published else "[red]no[/red]")
        table.add_row("Run in progress", "yes" if services.is_running() else "no")
        console.print(table)
