from django.urls import path
from .views import supplier_list_create, supplier_detail, supplier_products

urlpatterns = [
    path('proveedores/', supplier_list_create, name='supplier-list-create'),
    path('proveedores/<int:pk>/', supplier_detail, name='supplier-detail'),
    path('proveedores/<int:pk>/productos/', supplier_products, name='supplier-products'),
]
