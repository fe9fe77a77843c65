"""
Management command to set up the default role labels
"""
from django.core.management.base import BaseCommand
from django.db import transaction
from user_management.models import Role

DEFAULT_ROLES = [
    'IS_AUTHENTICATED_ANONYMOUSLY',
    'ROLE_ADMIN',
    'ROLE_PERMISSIONMANAGER',
    'ROLE_SUPER_ADMIN',
]


class Command(BaseCommand):
    help = 'Set up the default role labels'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show which roles would be created without saving them',
        )

    def handle(self, *args, **options):
        dry_run = options.get('dry_run')
        existing = set(Role.objects.filter(name__in=DEFAULT_ROLES).values_list('name', flat=True))
        missing = [name for name in DEFAULT_ROLES if name not in existing]

        if not missing:
            self.stdout.write('All default roles already exist')
            return

        if dry_run:
            for name in missing:
                self.stdout.write(f'Would create role {name}')
            return

        self.create_roles(missing)
        self.stdout.write(
            self.style.SUCCESS(f'Successfully created {len(missing)} role(s)')
        )

    @transaction.atomic
    def create_roles(self, names):
        for name in names:
            Role.objects.create(name=name)
            self.stdout.write(f'  Created role: {name}')
