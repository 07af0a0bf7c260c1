"""
Cache invalidation signals
Report caches are dropped once stock-relevant data changes are committed
"""
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging

from .cache_utils import invalidate_reports_cache

logger = logging.getLogger(__name__)

STOCK_RELEVANT_MODELS = (
    'catalog.Product',
    'inventory.Movement',
    'purchasing.PurchaseOrder',
)


@receiver(post_save)
@receiver(post_delete)
def invalidate_reports_on_change(sender, **kwargs):
    if sender._meta.label not in STOCK_RELEVANT_MODELS:
        return
    logger.debug(f"{sender._meta.label} changed, invalidating report cache on commit")
    # A summary rebuilt before commit would cache the old stock for the whole TTL
    transaction.on_commit(invalidate_reports_cache)
