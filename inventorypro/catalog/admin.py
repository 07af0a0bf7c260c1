from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'category', 'price', 'stock', 'min_stock', 'max_stock', 'warehouse', 'active']
    list_filter = ['active', 'category', 'warehouse', 'created_at']
    search_fields = ['name', 'code', 'description', 'category']
    ordering = ['name']
    readonly_fields = ['created_at', 'updated_at']
    filter_horizontal = ['warehouses']
