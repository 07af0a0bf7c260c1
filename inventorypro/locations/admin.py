from django.contrib import admin
from .models import Warehouse


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ['name', 'location', 'capacity', 'manager', 'active', 'created_at']
    list_filter = ['active']
    search_fields = ['name', 'location', 'manager']
    ordering = ['name']
