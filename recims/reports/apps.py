from django.apps import AppConfig


class ReportsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'recims.reports'

    def ready(self):
        """Import signals when app is ready"""
        import recims.reports.signals  # noqa: F401  # Cache invalidation signals
