"""
Rotation analytics for products
"""
import math
from datetime import timedelta

from django.utils import timezone

MIN_SUGGESTED_MIN_STOCK = 5
MIN_SUGGESTED_MAX_STOCK = 20


def days_since(moment, now=None):
    """Whole days elapsed since `moment`, never less than one"""
    now = now or timezone.now()
    return max(1, (now - moment).days)


def calculate_rotation_rate(units_sold, created_at, now=None):
    """Units leaving through `salida` per day since the product was created"""
    return units_sold / days_since(created_at, now)


def predict_restock_date(stock, rotation_rate, now=None):
    """Date the stock runs out at the current rotation, None when nothing rotates"""
    if rotation_rate == 0:
        return None
    now = now or timezone.now()
    return (now + timedelta(days=math.floor(stock / rotation_rate))).date()


def suggest_optimal_stock(rotation_rate):
    """Seven days of rotation as minimum, thirty as maximum"""
    return {
        'min': max(MIN_SUGGESTED_MIN_STOCK, math.ceil(rotation_rate * 7)),
        'max': max(MIN_SUGGESTED_MAX_STOCK, math.ceil(rotation_rate * 30)),
    }
