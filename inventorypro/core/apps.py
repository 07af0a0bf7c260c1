from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'inventorypro.core'

    def ready(self):
        """Import signals when app is ready"""
        import inventorypro.core.cache_signals  # noqa: F401  # Cache invalidation signals
