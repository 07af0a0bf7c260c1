"""
WSGI config for the InventoryPro backend.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'inventorypro.config.settings')

application = get_wsgi_application()
