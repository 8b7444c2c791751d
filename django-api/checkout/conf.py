"""Access to the ``CHECKOUT`` settings dict with defaults filled in."""

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "INITIAL_ORDER_STATUS": "Processing",
    "NOTIFY_ASYNC": True,
    "NOTIFY_WORKERS": 2,
    "ORDER_EMAIL_FROM": "Chop orders <orders@localhost>",
    "CACHE_TIMEOUT": 300,
}


def checkout_setting(name: str) -> Any:
    return getattr(settings, "CHECKOUT", {}).get(name, DEFAULTS[name])
