"""
Test suite for Reports module
Tests: rotation analytics, inventory summary, summary caching, product rotation endpoint
"""
from datetime import date, datetime, timedelta
from decimal import Decimal
from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from inventorypro.catalog.models import Product
from inventorypro.core.models import User
from inventorypro.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventorypro.inventory.services import register_movement
from inventorypro.reports.utils import (
    calculate_rotation_rate, days_since, predict_restock_date, suggest_optimal_stock,
)


class RotationUtilsTests(TestCase):
    """Test rotation helpers with a fixed clock"""

    def setUp(self):
        self.now = timezone.make_aware(datetime(2024, 3, 31, 12, 0))

    def test_days_since_is_at_least_one(self):
        self.assertEqual(days_since(self.now, now=self.now), 1)
        self.assertEqual(days_since(self.now - timedelta(days=30), now=self.now), 30)

    def test_rotation_rate(self):
        created = self.now - timedelta(days=10)
        self.assertEqual(calculate_rotation_rate(25, created, now=self.now), 2.5)
        self.assertEqual(calculate_rotation_rate(0, created, now=self.now), 0)

    def test_restock_date(self):
        self.assertEqual(predict_restock_date(10, 2.5, now=self.now), date(2024, 4, 4))
        self.assertEqual(predict_restock_date(10, 3, now=self.now), date(2024, 4, 3))

    def test_no_rotation_no_restock_date(self):
        self.assertIsNone(predict_restock_date(10, 0, now=self.now))

    def test_suggested_stock_floors(self):
        self.assertEqual(suggest_optimal_stock(0), {'min': 5, 'max': 20})
        self.assertEqual(suggest_optimal_stock(2.5), {'min': 18, 'max': 75})


class InventorySummaryTests(TestCase):
    """Test /api/reportes/resumen/"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.warehouse = TestDataFactory.create_warehouse()
        self.tornillo = TestDataFactory.create_product(
            price=Decimal('2.00'), stock=0, min_stock=5, max_stock=100, warehouse=self.warehouse,
        )
        self.tuerca = TestDataFactory.create_product(price=Decimal('1.50'), stock=50, min_stock=5, max_stock=100)
        TestDataFactory.create_product(price=Decimal('99.00'), stock=10, active=False)

    def tearDown(self):
        cache.clear()

    def test_summary(self):
        register_movement(self.tornillo, 'entrada', 4, user=self.user)
        TestDataFactory.create_purchase_order(items=[(self.tuerca, 1, Decimal('1.00'))])

        response = self.client.get('/api/reportes/resumen/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        summary = response.data['data']
        self.assertEqual(summary['totalProducts'], 2)
        self.assertEqual(summary['totalUnits'], 54)
        self.assertEqual(summary['totalValue'], 83.0)
        self.assertEqual(summary['stockStatus'], {'critical': 1, 'warning': 0, 'excess': 0, 'good': 1})
        self.assertEqual(summary['movements']['entrada'], 1)
        self.assertEqual(summary['movements']['salida'], 0)
        self.assertEqual(summary['pendingPurchaseOrders'], 1)
        self.assertIn('generatedAt', summary)

    def test_summary_is_cached_until_stock_changes(self):
        first = self.client.get('/api/reportes/resumen/').data['data']
        # queryset.update() bypasses signals, the cached summary is served
        Product.objects.filter(pk=self.tuerca.pk).update(stock=60)
        self.assertEqual(self.client.get('/api/reportes/resumen/').data['data'], first)

        with self.captureOnCommitCallbacks(execute=True):
            register_movement(self.tornillo, 'entrada', 1)
        refreshed = self.client.get('/api/reportes/resumen/').data['data']
        self.assertEqual(refreshed['totalUnits'], 61)

    def test_purchase_order_change_invalidates(self):
        self.client.get('/api/reportes/resumen/')
        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_purchase_order(items=[(self.tuerca, 1, Decimal('1.00'))])
        response = self.client.get('/api/reportes/resumen/')
        self.assertEqual(response.data['data']['pendingPurchaseOrders'], 1)

    def test_invalidation_waits_for_commit(self):
        first = self.client.get('/api/reportes/resumen/').data['data']
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            register_movement(self.tuerca, 'salida', 10)
            # Uncommitted stock change, the cached summary is still served
            self.assertEqual(self.client.get('/api/reportes/resumen/').data['data'], first)
        self.assertTrue(callbacks)
        for callback in callbacks:
            callback()
        self.assertEqual(self.client.get('/api/reportes/resumen/').data['data']['totalUnits'], 40)

    def test_summary_scoped_for_warehouse_manager(self):
        manager = TestDataFactory.create_user(role=User.ROLE_WAREHOUSE_MANAGER, warehouse=self.warehouse)
        self.client.authenticate_user(manager)
        summary = self.client.get('/api/reportes/resumen/').data['data']
        self.assertEqual(summary['totalProducts'], 1)
        self.assertEqual(summary['totalUnits'], 0)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/reportes/resumen/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ProductRotationTests(TestCase):
    """Test /api/reportes/productos/<id>/rotacion/"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(name='Cemento', stock=100, min_stock=10, max_stock=200)
        Product.objects.filter(pk=self.product.pk).update(created_at=timezone.now() - timedelta(days=10))

    def test_rotation(self):
        register_movement(self.product, 'salida', 10, user=self.user)
        register_movement(self.product, 'entrada', 50, user=self.user)

        response = self.client.get(f'/api/reportes/productos/{self.product.id}/rotacion/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['productName'], 'Cemento')
        self.assertEqual(data['stock'], 140)
        self.assertEqual(data['unitsSold'], 10)
        self.assertEqual(data['rotationRate'], 1.0)
        self.assertEqual(data['restockDate'], (timezone.now() + timedelta(days=140)).date().isoformat())
        self.assertEqual(data['suggestedStock'], {'min': 7, 'max': 30})
        self.assertEqual(data['stockStatus']['level'], 'good')

    def test_rotation_without_sales(self):
        response = self.client.get(f'/api/reportes/productos/{self.product.id}/rotacion/')
        data = response.data['data']
        self.assertEqual(data['unitsSold'], 0)
        self.assertEqual(data['rotationRate'], 0)
        self.assertIsNone(data['restockDate'])
        self.assertEqual(data['suggestedStock'], {'min': 5, 'max': 20})

    def test_unknown_product(self):
        response = self.client.get('/api/reportes/productos/99999/rotacion/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
