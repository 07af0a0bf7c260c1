"""
Stock arithmetic and movement registration.

Every stock change goes through `register_movement`, which locks the product
row for the duration of the transaction so concurrent movements on the same
product are serialized.
"""
import logging

from django.db import transaction

from inventorypro.catalog.models import Product
from inventorypro.core.exceptions import InsufficientStock, InvalidMovementType
from .models import Movement

logger = logging.getLogger(__name__)


def compute_new_stock(current_stock, movement_type, quantity):
    """Stock level after applying a movement of `quantity` units"""
    if movement_type in (Movement.TYPE_ENTRY, Movement.TYPE_RETURN):
        return current_stock + quantity
    if movement_type == Movement.TYPE_EXIT:
        new_stock = current_stock - quantity
        if new_stock < 0:
            raise InsufficientStock()
        return new_stock
    if movement_type == Movement.TYPE_ADJUSTMENT:
        # Adjustments set the exact stock
        return quantity
    raise InvalidMovementType()


def register_movement(product, movement_type, quantity, user=None, observation='', lot_number='',
                      reason='', warehouse=None, purchase_order=None, date=None):
    """
    Apply a movement to a product and record it.

    `product` may be a Product instance or its primary key. Returns the
    created Movement; the product's new stock is `movement.new_stock`.
    Raises InsufficientStock or InvalidMovementType without touching stock.
    """
    product_id = product.pk if isinstance(product, Product) else product

    with transaction.atomic():
        locked = Product.objects.select_for_update().get(pk=product_id)
        previous_stock = locked.stock
        new_stock = compute_new_stock(previous_stock, movement_type, quantity)

        locked.stock = new_stock
        locked.save(update_fields=['stock', 'updated_at'])

        extra = {'date': date} if date is not None else {}
        movement = Movement.objects.create(
            type=movement_type,
            product=locked,
            product_name=locked.name,
            quantity=quantity,
            previous_stock=previous_stock,
            new_stock=new_stock,
            observation=observation or '',
            user=user,
            user_name=(user.name or user.email) if user else '',
            lot_number=lot_number or '',
            reason=reason or '',
            warehouse=warehouse,
            warehouse_name=warehouse.name if warehouse else '',
            purchase_order=purchase_order,
            **extra,
        )

    if isinstance(product, Product):
        product.stock = new_stock

    logger.info(
        f"Movement {movement.id}: {movement_type} {quantity} x {locked.name} "
        f"(stock {previous_stock} -> {new_stock})"
    )
    return movement
