"""
Stock level classification for products
"""

STATUS_CRITICAL = 'critical'
STATUS_WARNING = 'warning'
STATUS_EXCESS = 'excess'
STATUS_GOOD = 'good'

STOCK_STATUS_LEVELS = (STATUS_CRITICAL, STATUS_WARNING, STATUS_EXCESS, STATUS_GOOD)

# Percentages of min_stock / max_stock
WARNING_THRESHOLD = 150
EXCESS_THRESHOLD = 90


def is_critical(stock, min_stock):
    return stock <= min_stock


def is_warning(stock, min_stock):
    """Above the minimum but within 150% of it. A zero minimum never warns."""
    if min_stock <= 0:
        return False
    return stock > min_stock and stock * 100 <= min_stock * WARNING_THRESHOLD


def is_excess(stock, max_stock):
    """More than 90% of the maximum. Any stock counts as excess when the maximum is zero."""
    if max_stock <= 0:
        return stock > 0
    return stock * 100 > max_stock * EXCESS_THRESHOLD


def get_stock_status(stock, min_stock, max_stock):
    """
    Classify a stock level.

    Returns a dict with `level` (critical, warning, excess or good) and the
    Spanish `label` shown to users.
    """
    if stock == 0:
        return {'level': STATUS_CRITICAL, 'label': 'Sin Stock'}
    if is_critical(stock, min_stock):
        return {'level': STATUS_CRITICAL, 'label': 'Stock Crítico'}
    if is_warning(stock, min_stock):
        return {'level': STATUS_WARNING, 'label': 'Stock Bajo'}
    if is_excess(stock, max_stock):
        return {'level': STATUS_EXCESS, 'label': 'Stock Excesivo'}
    return {'level': STATUS_GOOD, 'label': 'Stock Óptimo'}


def product_stock_status(product):
    return get_stock_status(product.stock, product.min_stock, product.max_stock)


def group_stock_alerts(products):
    """
    Split products into `critical`, `warning` and `excess` lists.
    A product may appear in more than one group (e.g. min_stock above 90% of max_stock).
    """
    alerts = {STATUS_CRITICAL: [], STATUS_WARNING: [], STATUS_EXCESS: []}
    for product in products:
        if is_critical(product.stock, product.min_stock):
            alerts[STATUS_CRITICAL].append(product)
        elif is_warning(product.stock, product.min_stock):
            alerts[STATUS_WARNING].append(product)
        if is_excess(product.stock, product.max_stock):
            alerts[STATUS_EXCESS].append(product)
    return alerts
