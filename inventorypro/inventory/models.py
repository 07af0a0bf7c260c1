from django.conf import settings
from django.db import models
from django.utils import timezone


class Movement(models.Model):
    """Stock movements (entradas, salidas, ajustes, devoluciones)"""
    TYPE_ENTRY = 'entrada'
    TYPE_EXIT = 'salida'
    TYPE_ADJUSTMENT = 'ajuste'
    TYPE_RETURN = 'devolucion'

    TYPE_CHOICES = [
        (TYPE_ENTRY, 'Entrada'),
        (TYPE_EXIT, 'Salida'),
        (TYPE_ADJUSTMENT, 'Ajuste'),
        (TYPE_RETURN, 'Devolución'),
    ]

    type = models.CharField(max_length=20, choices=TYPE_CHOICES, db_index=True)
    product = models.ForeignKey('catalog.Product', on_delete=models.PROTECT, related_name='movements')
    product_name = models.CharField(max_length=200, blank=True)  # snapshot at movement time
    quantity = models.PositiveIntegerField()
    previous_stock = models.IntegerField(default=0)
    new_stock = models.IntegerField(default=0)
    date = models.DateTimeField(default=timezone.now, db_index=True)
    observation = models.TextField(blank=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='movements'
    )
    user_name = models.CharField(max_length=200, blank=True)
    lot_number = models.CharField(max_length=100, blank=True)
    reason = models.CharField(max_length=255, blank=True)
    warehouse = models.ForeignKey(
        'locations.Warehouse', on_delete=models.SET_NULL, null=True, blank=True, related_name='movements'
    )
    warehouse_name = models.CharField(max_length=200, blank=True)
    purchase_order = models.ForeignKey(
        'purchasing.PurchaseOrder', on_delete=models.SET_NULL, null=True, blank=True, related_name='movements'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.get_type_display()} {self.quantity} x {self.product_name}"

    class Meta:
        db_table = 'movements'
        ordering = ['-date', '-id']
        indexes = [
            models.Index(fields=['product', '-date'], name='idx_movement_product_date'),
        ]
