from django.contrib import admin
from .models import Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'nit', 'contact', 'phone', 'email', 'active', 'created_at']
    list_filter = ['active', 'created_at']
    search_fields = ['name', 'nit', 'contact', 'email', 'phone']
    ordering = ['name']
