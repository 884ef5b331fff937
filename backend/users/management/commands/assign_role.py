from django.core.management.base import BaseCommand, CommandError
from users.models import User, Role
from rich.console import Console


class Command(BaseCommand):
    help = 'Assign a role (Admin or Student) to a user'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.console = Console()

    def add_arguments(self, parser):
        parser.add_argument('username', type=str, help='Username (roll number for students)')
        parser.add_argument('role', type=str, help='Role name to assign')

    def handle(self, *args, **options):
        username = options['username']
        role_name = options['role']

        try:
            user = User.objects.get(username=username)
        except User.DoesNotExist:
            raise CommandError(f'User "{username}" does not exist')

        try:
            user.assign_role(role_name)
        except ValueError as e:
            available_roles = ', '.join(Role.objects.values_list('role_name', flat=True))
            raise CommandError(f'{e}. Available roles: {available_roles or "None"}')

        self.console.print(f"[green]✓ Assigned role '{role_name}' to user '{username}'[/green]")
        self.console.print(f"[cyan]Active role for {username}: {user.get_active_role_name() or 'None'}[/cyan]")
