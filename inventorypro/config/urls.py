"""
URL configuration for the InventoryPro backend.

Every app mounts its routes under `/api/`; see each app's `urls.py`.
"""
from django.contrib import admin
from django.urls import path, include
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny

from inventorypro.core.responses import success_response

admin.site.site_header = "InventoryPro Admin Panel"
admin.site.site_title = "InventoryPro Admin Portal"
admin.site.index_title = "Bienvenido a InventoryPro"


@api_view(['GET'])
@permission_classes([AllowAny])
def api_root(request):
    """Service banner listing the mounted endpoints"""
    return success_response(
        {
            'version': '1.0.0',
            'endpoints': {
                'auth': '/api/auth/',
                'usuarios': '/api/usuarios/',
                'productos': '/api/productos/',
                'movimientos': '/api/movimientos/',
                'proveedores': '/api/proveedores/',
                'bodegas': '/api/bodegas/',
                'ordenes_compra': '/api/ordenes-compra/',
                'auditoria': '/api/auditoria/',
                'reportes': '/api/reportes/',
            },
        },
        message='API de Inventario funcionando correctamente',
    )


urlpatterns = [
    path('', api_root, name='api-root'),
    path('admin/', admin.site.urls),
    path('api/', include('inventorypro.core.urls')),
    path('api/', include('inventorypro.locations.urls')),
    path('api/', include('inventorypro.parties.urls')),
    path('api/', include('inventorypro.catalog.urls')),
    path('api/', include('inventorypro.inventory.urls')),
    path('api/', include('inventorypro.purchasing.urls')),
    path('api/', include('inventorypro.reports.urls')),
]
