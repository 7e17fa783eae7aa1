"""
Management command to validate and print the RBAC permission matrix.
Run: python manage.py check_rbac
"""

from django.core.management.base import BaseCommand, CommandError

from app.platform.rbac.constants import (
    PERMISSION_MATRIX,
    ROLE_DISPLAY_NAMES,
    ROLE_HIERARCHY,
    Role,
)
from app.platform.rbac.exceptions import InvalidRole, PermissionMatrixError
from app.platform.rbac.utils import (
    get_role_permissions,
    sorted_roles,
    validate_permission_matrix,
)


class Command(BaseCommand):
    help = 'Validate the RBAC permission matrix and print roles and permissions'

    def add_arguments(self, parser):
        parser.add_argument(
            '--role',
            help='Only print the permissions granted to this role (e.g. REP)',
        )

    def handle(self, *args, **options):
        self.stdout.write('Validating permission matrix...')
        try:
            validate_permission_matrix()
        except PermissionMatrixError as e:
            raise CommandError(str(e))
        self.stdout.write(self.style.SUCCESS(f'  {len(PERMISSION_MATRIX)} permissions, all covered'))

        role_code = options.get('role')
        if role_code:
            try:
                role = Role.coerce(role_code.upper())
            except InvalidRole as e:
                raise CommandError(str(e))
            self._write_role(role)
            return

        self.stdout.write('Role hierarchy:')
        for role in sorted_roles(ROLE_HIERARCHY, descending=True):
            self.stdout.write(f'  {ROLE_HIERARCHY[role]}  {role.value} ({ROLE_DISPLAY_NAMES[role]})')

        self.stdout.write('Permission matrix:')
        width = max(len(p.value) for p in PERMISSION_MATRIX)
        for permission, roles in PERMISSION_MATRIX.items():
            role_list = ', '.join(r.value for r in sorted_roles(roles, descending=True))
            self.stdout.write(f'  {permission.value.ljust(width)}  {role_list}')

        self.stdout.write(self.style.SUCCESS('\nRBAC matrix is valid.'))

    def _write_role(self, role):
        permissions = sorted(p.value for p in get_role_permissions(role))
        self.stdout.write(f'{ROLE_DISPLAY_NAMES[role]} ({role.value}), rank {ROLE_HIERARCHY[role]}:')
        for code in permissions:
            self.stdout.write(f'  - {code}')
        self.stdout.write(f'  {len(permissions)} permissions')
