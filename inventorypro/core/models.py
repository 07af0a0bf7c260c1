from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    """Manager for the email-based user model"""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('El email es requerido')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', User.ROLE_ADMIN)
        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    """Application user. Logs in with email; `role` drives API permissions."""
    ROLE_ADMIN = 'admin'
    ROLE_EMPLOYEE = 'empleado'
    ROLE_AUDITOR = 'auditor'
    ROLE_WAREHOUSE_MANAGER = 'encargado_bodega'

    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrador'),
        (ROLE_EMPLOYEE, 'Empleado'),
        (ROLE_AUDITOR, 'Auditor'),
        (ROLE_WAREHOUSE_MANAGER, 'Encargado de Bodega'),
    ]

    username = None
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=200)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_EMPLOYEE)
    avatar = models.CharField(max_length=500, blank=True)
    # Tenant scope for warehouse managers
    warehouse = models.ForeignKey(
        'locations.Warehouse', on_delete=models.SET_NULL, null=True, blank=True, related_name='users'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    objects = UserManager()

    def __str__(self):
        return self.name or self.email

    def has_role(self, *roles):
        if self.is_superuser:
            return True
        return self.role in roles

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']


class AuditLog(models.Model):
    """Append-only record of user actions"""
    ACTION_CREATE = 'CREAR'
    ACTION_UPDATE = 'ACTUALIZAR'
    ACTION_DELETE = 'ELIMINAR'
    ACTION_APPROVE = 'APROBAR'
    ACTION_REJECT = 'RECHAZAR'
    ACTION_COMPLETE = 'COMPLETAR'
    ACTION_LOGIN = 'LOGIN'
    ACTION_LOGOUT = 'LOGOUT'
    ACTION_REGISTER = 'REGISTRO'

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='audit_logs')
    user_name = models.CharField(max_length=200, blank=True)
    action = models.CharField(max_length=50)
    entity = models.CharField(max_length=100)
    entity_id = models.CharField(max_length=100)
    details = models.TextField(blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.action} {self.entity}#{self.entity_id}"

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-timestamp', '-id']
        indexes = [
            models.Index(fields=['-timestamp'], name='idx_audit_timestamp'),
            models.Index(fields=['action'], name='idx_audit_action'),
            models.Index(fields=['entity', 'entity_id'], name='idx_audit_entity'),
        ]
