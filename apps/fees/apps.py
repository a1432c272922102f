# fees/apps.py

from django.apps import AppConfig


class FeesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fees"
    verbose_name = "Tuition Billing"

    def ready(self):
        """Connect the billing signal handlers (record reconciliation)."""
        import fees.signals  # noqa: F401
