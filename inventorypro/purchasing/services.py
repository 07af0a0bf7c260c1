"""
Purchase order lifecycle: creation, edits while pending, status transitions
and completion (stock reception).
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from inventorypro.core.exceptions import InvalidStatusTransition, OrderNotEditable
from inventorypro.inventory.models import Movement
from inventorypro.inventory.services import register_movement
from .models import PurchaseOrder, PurchaseOrderItem

logger = logging.getLogger(__name__)


def items_total(items_data):
    return sum((Decimal(item['quantity']) * item['price'] for item in items_data), Decimal('0.00'))


def _create_items(order, items_data):
    for item in items_data:
        product = item['product']
        PurchaseOrderItem.objects.create(
            purchase_order=order,
            product=product,
            product_name=item.get('product_name') or product.name,
            quantity=item['quantity'],
            price=item['price'],
        )


def create_purchase_order(validated_data, user):
    """Create a pending order with its items. Total defaults to the items sum."""
    items_data = validated_data['items']
    supplier = validated_data['supplier']

    with transaction.atomic():
        order = PurchaseOrder.objects.create(
            supplier=supplier,
            supplier_name=validated_data.get('supplier_name') or supplier.name,
            total_amount=validated_data.get('total_amount') or items_total(items_data),
            status=PurchaseOrder.STATUS_PENDING,
            notes=validated_data.get('notes', ''),
            created_by=user,
        )
        _create_items(order, items_data)

    logger.info(f"Purchase order {order.id} created for {order.supplier_name} ({order.total_amount})")
    return order


def update_purchase_order(order, validated_data):
    """
    Edit a pending order. Items are replaced when provided and the total is
    recomputed unless given explicitly.
    """
    with transaction.atomic():
        order = PurchaseOrder.objects.select_for_update().get(pk=order.pk)
        if order.status != PurchaseOrder.STATUS_PENDING:
            raise OrderNotEditable()

        if 'supplier' in validated_data:
            order.supplier = validated_data['supplier']
            order.supplier_name = validated_data.get('supplier_name') or order.supplier.name
        elif validated_data.get('supplier_name'):
            order.supplier_name = validated_data['supplier_name']
        if 'notes' in validated_data:
            order.notes = validated_data['notes']

        items_data = validated_data.get('items')
        if items_data:
            order.items.all().delete()
            _create_items(order, items_data)

        if validated_data.get('total_amount') is not None:
            order.total_amount = validated_data['total_amount']
        elif items_data:
            order.total_amount = items_total(items_data)
        order.save()

    logger.info(f"Purchase order {order.id} updated")
    return order


def transition_purchase_order(order, new_status, user):
    """Move an order to `aprobada` or `rechazada`"""
    with transaction.atomic():
        order = PurchaseOrder.objects.select_for_update().get(pk=order.pk)
        if not order.can_transition_to(new_status):
            raise InvalidStatusTransition(
                f"No se puede cambiar una orden {order.status} a {new_status}"
            )
        order.status = new_status
        order.approved_by = user
        order.save(update_fields=['status', 'approved_by', 'updated_at'])

    logger.info(f"Purchase order {order.id} -> {new_status} by {user.email}")
    return order


def complete_purchase_order(order, user):
    """
    Receive an approved order: one `entrada` movement per item, product stock
    incremented, order marked `completada`. All or nothing.
    """
    with transaction.atomic():
        order = PurchaseOrder.objects.select_for_update().get(pk=order.pk)
        if not order.can_transition_to(PurchaseOrder.STATUS_COMPLETED):
            raise InvalidStatusTransition('Solo se pueden completar órdenes aprobadas')

        observation = f"Orden de compra #{order.id} - {order.supplier_name}"
        movements = [
            register_movement(
                item.product_id,
                Movement.TYPE_ENTRY,
                item.quantity,
                user=user,
                observation=observation,
                reason='Recepción de orden de compra',
                purchase_order=order,
            )
            for item in order.items.all()
        ]

        order.status = PurchaseOrder.STATUS_COMPLETED
        order.completed_at = timezone.now()
        order.save(update_fields=['status', 'completed_at', 'updated_at'])

    logger.info(f"Purchase order {order.id} completed by {user.email}: {len(movements)} movements")
    return order
