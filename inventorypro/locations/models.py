from django.db import models


class Warehouse(models.Model):
    """Warehouses (bodegas)"""
    name = models.CharField(max_length=200)
    location = models.CharField(max_length=300, blank=True)
    capacity = models.PositiveIntegerField(default=0)
    manager = models.CharField(max_length=200, blank=True)
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'warehouses'
        ordering = ['name']
