from django.urls import path
from .views import product_list_create, product_detail, product_alerts

urlpatterns = [
    path('productos/', product_list_create, name='product-list-create'),
    path('productos/alertas/', product_alerts, name='product-alerts'),
    path('productos/<int:pk>/', product_detail, name='product-detail'),
]
