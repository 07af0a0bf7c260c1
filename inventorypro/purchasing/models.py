from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class PurchaseOrder(models.Model):
    """Purchase order to a supplier"""
    STATUS_PENDING = 'pendiente'
    STATUS_APPROVED = 'aprobada'
    STATUS_REJECTED = 'rechazada'
    STATUS_COMPLETED = 'completada'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pendiente'),
        (STATUS_APPROVED, 'Aprobada'),
        (STATUS_REJECTED, 'Rechazada'),
        (STATUS_COMPLETED, 'Completada'),
    ]

    # status -> statuses reachable from it
    TRANSITIONS = {
        STATUS_PENDING: (STATUS_APPROVED, STATUS_REJECTED),
        STATUS_APPROVED: (STATUS_COMPLETED,),
        STATUS_REJECTED: (),
        STATUS_COMPLETED: (),
    }

    supplier = models.ForeignKey('parties.Supplier', on_delete=models.PROTECT, related_name='purchase_orders')
    supplier_name = models.CharField(max_length=200, blank=True)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='purchase_orders'
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='approved_purchase_orders'
    )
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"OC-{self.id} ({self.supplier_name})"

    def can_transition_to(self, new_status):
        return new_status in self.TRANSITIONS.get(self.status, ())

    def get_items_total(self):
        """Sum of item subtotals"""
        return sum((item.subtotal for item in self.items.all()), Decimal('0.00'))

    class Meta:
        db_table = 'purchase_orders'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['status'], name='idx_po_status'),
            models.Index(fields=['supplier', 'status'], name='idx_po_supplier_status'),
        ]


class PurchaseOrderItem(models.Model):
    """Purchase order line items"""
    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey('catalog.Product', on_delete=models.PROTECT, related_name='purchase_order_items')
    product_name = models.CharField(max_length=200, blank=True)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    def save(self, *args, **kwargs):
        self.subtotal = self.quantity * self.price
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.quantity} x {self.product_name}"

    class Meta:
        db_table = 'purchase_order_items'
        ordering = ['id']
