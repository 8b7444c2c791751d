import atexit

from django.apps import AppConfig


class CheckoutConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "checkout"
    notifier = None

    def ready(self) -> None:
        from checkout import signals  # noqa: F401
        from checkout.notifications.dispatch import build_notifier
        from checkout.utils.logging import configure_structlog

        configure_structlog()
        self.notifier = build_notifier()
        atexit.register(self.notifier.shutdown)
