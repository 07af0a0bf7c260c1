from django.urls import path
from .views import (
    purchase_order_list_create, purchase_order_stats, purchase_orders_by_status, purchase_orders_by_supplier,
    purchase_order_detail, purchase_order_approve, purchase_order_reject, purchase_order_complete,
)

urlpatterns = [
    path('ordenes-compra/', purchase_order_list_create, name='purchase-order-list-create'),
    path('ordenes-compra/stats/', purchase_order_stats, name='purchase-order-stats'),
    path('ordenes-compra/estado/<str:order_status>/', purchase_orders_by_status, name='purchase-orders-by-status'),
    path('ordenes-compra/proveedor/<int:supplier_id>/', purchase_orders_by_supplier, name='purchase-orders-by-supplier'),
    path('ordenes-compra/<int:pk>/', purchase_order_detail, name='purchase-order-detail'),
    path('ordenes-compra/<int:pk>/aprobar/', purchase_order_approve, name='purchase-order-approve'),
    path('ordenes-compra/<int:pk>/rechazar/', purchase_order_reject, name='purchase-order-reject'),
    path('ordenes-compra/<int:pk>/completar/', purchase_order_complete, name='purchase-order-complete'),
]
