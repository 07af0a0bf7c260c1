from django.urls import path
from .views import movement_list_create, movement_detail

urlpatterns = [
    path('movimientos/', movement_list_create, name='movement-list-create'),
    path('movimientos/<int:pk>/', movement_detail, name='movement-detail'),
]
