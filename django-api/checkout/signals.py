"""Django signals for cache invalidation.

Keys are deleted after the surrounding transaction commits, so a concurrent
reader cannot re-cache the pre-commit state.
"""

from django.core.cache import cache
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from checkout.cache import ORDER_STATUSES_KEY, customer_orders_key
from checkout.models import Order, OrderStatus


@receiver([post_save, post_delete], sender=OrderStatus)
def invalidate_order_status_cache(sender, instance, using, **kwargs):
    """Invalidate the status list when a status is saved or deleted."""
    transaction.on_commit(lambda: cache.delete(ORDER_STATUSES_KEY), using=using)


@receiver(post_save, sender=OrderStatus)
def invalidate_order_lists_showing_status(sender, instance, created, using, **kwargs):
    """Invalidate the order lists that show a renamed status."""
    if created:
        return
    customer_ids = (
        Order.objects.using(using)
        .filter(status=instance)
        .values_list("customer_id", flat=True)
        .distinct()
    )
    keys = [customer_orders_key(customer_id) for customer_id in customer_ids]
    if keys:
        transaction.on_commit(lambda: cache.delete_many(keys), using=using)


@receiver([post_save, post_delete], sender=Order)
def invalidate_customer_orders_cache(sender, instance, using, **kwargs):
    """Invalidate the customer's order list when one of their orders is saved."""
    key = customer_orders_key(instance.customer_id)
    transaction.on_commit(lambda: cache.delete(key), using=using)
