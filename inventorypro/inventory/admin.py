from django.contrib import admin
from .models import Movement


@admin.register(Movement)
class MovementAdmin(admin.ModelAdmin):
    list_display = ['date', 'type', 'product_name', 'quantity', 'previous_stock', 'new_stock', 'user_name', 'warehouse_name']
    list_filter = ['type', 'date', 'warehouse']
    search_fields = ['product_name', 'user_name', 'lot_number', 'observation']
    ordering = ['-date']
    date_hierarchy = 'date'
    readonly_fields = [field.name for field in Movement._meta.fields]

    def has_add_permission(self, request):
        # Movements change stock and must go through the API
        return False
