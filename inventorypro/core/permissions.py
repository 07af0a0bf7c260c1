"""Role based permissions for the API"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import User


class HasRole(BasePermission):
    """Grant access to authenticated users whose role is in `allowed_roles`"""
    allowed_roles = ()
    message = 'No tiene permisos para realizar esta acción'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.has_role(*self.allowed_roles)


class IsAdminRole(HasRole):
    allowed_roles = (User.ROLE_ADMIN,)
    message = 'Solo los administradores pueden realizar esta acción'


class CanViewAudit(HasRole):
    allowed_roles = (User.ROLE_ADMIN, User.ROLE_AUDITOR)
    message = 'Solo administradores y auditores pueden consultar la auditoría'


class CanManageWarehouse(HasRole):
    allowed_roles = (User.ROLE_ADMIN, User.ROLE_WAREHOUSE_MANAGER)
    message = 'Solo administradores y encargados de bodega pueden realizar esta acción'


class ReadOnlyOrWarehouseManager(CanManageWarehouse):
    """Anyone authenticated may read; writes need admin or encargado_bodega"""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return super().has_permission(request, view)


def scoped_warehouse_id(user):
    """
    Warehouse a user is confined to, or None when the user sees every warehouse.
    Only `encargado_bodega` users with an assigned warehouse are scoped.
    """
    if user.is_superuser:
        return None
    if user.role == User.ROLE_WAREHOUSE_MANAGER and user.warehouse_id:
        return user.warehouse_id
    return None
