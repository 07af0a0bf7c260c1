from django.urls import path
from . import views

urlpatterns = [
    path('reportes/resumen/', views.inventory_summary, name='inventory-summary'),
    path('reportes/productos/<int:pk>/rotacion/', views.product_rotation, name='product-rotation'),
]
