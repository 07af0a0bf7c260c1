from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    """Product master"""
    name = models.CharField(max_length=200, db_index=True)
    description = models.TextField(blank=True)
    code = models.CharField(max_length=100, unique=True, blank=True, null=True, db_index=True)
    category = models.CharField(max_length=100, blank=True, db_index=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    stock = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    min_stock = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    max_stock = models.IntegerField(default=100, validators=[MinValueValidator(0)])
    supplier = models.ForeignKey(
        'parties.Supplier', on_delete=models.SET_NULL, null=True, blank=True, related_name='products'
    )
    supplier_name = models.CharField(max_length=200, blank=True)  # free text when no supplier row exists
    warehouse = models.ForeignKey(
        'locations.Warehouse', on_delete=models.SET_NULL, null=True, blank=True, related_name='primary_products'
    )
    warehouses = models.ManyToManyField('locations.Warehouse', blank=True, related_name='products')
    image = models.CharField(max_length=500, blank=True)
    active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.code or 'SIN-CODIGO'})"

    class Meta:
        db_table = 'products'
        ordering = ['-created_at']
