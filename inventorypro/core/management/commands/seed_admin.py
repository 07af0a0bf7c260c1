"""
Management command to create an admin user or reset its password
Usage: python manage.py seed_admin --email admin@inventorypro.com --password secret123 --name "Administrador"
"""
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from inventorypro.core.models import User


class Command(BaseCommand):
    help = 'Create an admin user, or reset the password of an existing one'

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True, help='Admin email (login)')
        parser.add_argument('--password', required=True, help='Password, at least 6 characters')
        parser.add_argument('--name', default='Administrador', help='Display name')

    def handle(self, *args, **options):
        email = User.objects.normalize_email(options['email'])
        password = options['password']
        if len(password) < 6:
            raise CommandError('La contraseña debe tener al menos 6 caracteres')

        with transaction.atomic():
            user = User.objects.filter(email__iexact=email).first()
            if user is None:
                User.objects.create_user(
                    email=email,
                    password=password,
                    name=options['name'],
                    role=User.ROLE_ADMIN,
                    is_staff=True,
                )
                self.stdout.write(self.style.SUCCESS(f'✓ Admin {email} created'))
                return

            user.set_password(password)
            user.role = User.ROLE_ADMIN
            user.is_active = True
            user.is_staff = True
            user.save(update_fields=['password', 'role', 'is_active', 'is_staff', 'updated_at'])
        self.stdout.write(self.style.SUCCESS(f'✓ Password reset for admin {email}'))
