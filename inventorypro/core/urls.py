from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    register, login, logout, user_me, auth_user_detail,
    user_list_create, user_detail,
    audit_log_list, audit_log_detail, audit_log_user_activity, audit_log_entity_history,
)

urlpatterns = [
    # Auth endpoints
    path('auth/register/', register, name='register'),
    path('auth/login/', login, name='login'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('auth/logout/', logout, name='logout'),
    path('auth/me/', user_me, name='user-me'),
    path('auth/user/<int:pk>/', auth_user_detail, name='auth-user-detail'),

    # User endpoints
    path('usuarios/', user_list_create, name='user-list-create'),
    path('usuarios/<int:pk>/', user_detail, name='user-detail'),

    # AuditLog endpoints
    path('auditoria/', audit_log_list, name='audit-log-list'),
    path('auditoria/usuario/<int:user_id>/', audit_log_user_activity, name='audit-log-user-activity'),
    path('auditoria/entidad/<str:entity>/<str:entity_id>/', audit_log_entity_history, name='audit-log-entity-history'),
    path('auditoria/<int:pk>/', audit_log_detail, name='audit-log-detail'),
]
