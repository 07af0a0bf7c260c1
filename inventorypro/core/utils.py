"""Utility functions for audit logging"""
import logging

from django.db import transaction

from .models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def record_audit(request=None, action=None, entity=None, entity_id=None, details='', user=None):
    """
    Append an audit log entry.

    Args:
        request: Django/DRF request (for user and IP) - optional if user is provided
        action: Upper-case verb (CREAR, ACTUALIZAR, MOVIMIENTO_ENTRADA, ...)
        entity: Resource name (productos, movimientos, orden_compra, ...)
        entity_id: ID of the affected record
        details: Human readable description
        user: Optional actor override (defaults to request.user)

    Returns the created AuditLog, or None when the entry could not be written.
    Audit failures never break the calling operation.
    """
    audit_user = user
    if audit_user is None and request is not None:
        audit_user = getattr(request, 'user', None)
    if audit_user is not None and not audit_user.is_authenticated:
        audit_user = None

    if not action or not entity or entity_id in (None, ''):
        logger.warning(
            f"Audit log skipped: missing required fields (action={action}, entity={entity}, entity_id={entity_id})"
        )
        return None

    try:
        # Savepoint so a failed insert does not poison an enclosing transaction
        with transaction.atomic():
            return AuditLog.objects.create(
                user=audit_user,
                user_name=(audit_user.name or audit_user.email) if audit_user else '',
                action=action,
                entity=entity,
                entity_id=str(entity_id),
                details=details or '',
                ip_address=get_client_ip(request),
            )
    except Exception as e:
        logger.error(f"Failed to create audit log: {str(e)}", exc_info=True)
        return None
