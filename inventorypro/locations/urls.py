from django.urls import path
from .views import warehouse_list_create, warehouse_detail, warehouse_products

urlpatterns = [
    path('bodegas/', warehouse_list_create, name='warehouse-list-create'),
    path('bodegas/<int:pk>/', warehouse_detail, name='warehouse-detail'),
    path('bodegas/<int:pk>/productos/', warehouse_products, name='warehouse-products'),
]
