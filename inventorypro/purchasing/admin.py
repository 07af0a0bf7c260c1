from django.contrib import admin
from .models import PurchaseOrder, PurchaseOrderItem


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0
    readonly_fields = ['subtotal']


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'supplier_name', 'status', 'total_amount', 'created_by', 'approved_by', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['supplier_name', 'notes']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'updated_at', 'completed_at']
    inlines = [PurchaseOrderItemInline]
