"""
Test suite for Catalog module
Tests: stock classification, product CRUD, field translation, filters, alerts, tenant scope
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from inventorypro.catalog.models import Product
from inventorypro.catalog.utils import get_stock_status, group_stock_alerts
from inventorypro.core.models import AuditLog, User
from inventorypro.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class StockStatusTests(TestCase):
    """Test get_stock_status thresholds"""

    def test_zero_stock_is_critical(self):
        self.assertEqual(get_stock_status(0, 10, 100), {'level': 'critical', 'label': 'Sin Stock'})

    def test_at_minimum_is_critical(self):
        self.assertEqual(get_stock_status(10, 10, 100)['label'], 'Stock Crítico')

    def test_within_150_percent_is_warning(self):
        self.assertEqual(get_stock_status(15, 10, 100), {'level': 'warning', 'label': 'Stock Bajo'})
        self.assertEqual(get_stock_status(16, 10, 100)['level'], 'good')

    def test_above_90_percent_of_max_is_excess(self):
        self.assertEqual(get_stock_status(91, 10, 100), {'level': 'excess', 'label': 'Stock Excesivo'})
        self.assertEqual(get_stock_status(90, 10, 100)['level'], 'good')

    def test_good(self):
        self.assertEqual(get_stock_status(50, 10, 100), {'level': 'good', 'label': 'Stock Óptimo'})

    def test_zero_minimum_never_warns(self):
        self.assertEqual(get_stock_status(1, 0, 100)['level'], 'good')

    def test_group_alerts(self):
        critical = Product(name='a', price=1, stock=2, min_stock=5, max_stock=100)
        warning = Product(name='b', price=1, stock=7, min_stock=5, max_stock=100)
        excess = Product(name='c', price=1, stock=95, min_stock=5, max_stock=100)
        good = Product(name='d', price=1, stock=50, min_stock=5, max_stock=100)
        alerts = group_stock_alerts([critical, warning, excess, good])
        self.assertEqual(alerts['critical'], [critical])
        self.assertEqual(alerts['warning'], [warning])
        self.assertEqual(alerts['excess'], [excess])


class ProductAPITests(TestCase):
    """Test /api/productos/ endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_product_with_spanish_fields(self):
        supplier = TestDataFactory.create_supplier(name='Proveedor Uno')
        data = {
            'nombre': 'Arroz 500g', 'descripcion': 'Arroz blanco', 'precio': '2500.00',
            'codigo': 'ARR-500', 'categoria': 'Granos', 'minStock': 10, 'maxStock': 200,
            'supplierId': supplier.id,
        }
        response = self.client.post('/api/productos/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        product = Product.objects.get(code='ARR-500')
        self.assertEqual(product.name, 'Arroz 500g')
        self.assertEqual(product.price, Decimal('2500.00'))
        self.assertEqual(product.stock, 0)
        self.assertEqual(product.min_stock, 10)
        self.assertEqual(product.max_stock, 200)
        self.assertEqual(product.supplier_name, 'Proveedor Uno')
        self.assertEqual(response.data['data']['stock_status']['level'], 'critical')
        self.assertTrue(AuditLog.objects.filter(entity='productos', action=AuditLog.ACTION_CREATE).exists())

    def test_create_product_defaults(self):
        response = self.client.post('/api/productos/', {'name': 'Sal', 'price': '900'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        product = Product.objects.get(name='Sal')
        self.assertEqual((product.stock, product.min_stock, product.max_stock), (0, 0, 100))
        self.assertIsNone(product.code)

    def test_create_product_requires_name_and_price(self):
        response = self.client.post('/api/productos/', {'nombre': 'Sin precio'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Nombre y precio son requeridos')

    def test_create_product_rejects_negative_stock(self):
        response = self.client.post('/api/productos/', {'name': 'X', 'price': '1', 'stock': -1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_product_with_warehouses(self):
        first = TestDataFactory.create_warehouse()
        second = TestDataFactory.create_warehouse()
        data = {'name': 'Aceite', 'price': '12000', 'warehouseId': first.id, 'warehouseIds': [first.id, second.id]}
        response = self.client.post('/api/productos/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        product = Product.objects.get(name='Aceite')
        self.assertEqual(product.warehouse, first)
        self.assertEqual(set(product.warehouses.values_list('id', flat=True)), {first.id, second.id})

    def test_list_only_active_newest_first(self):
        older = TestDataFactory.create_product(name='Viejo')
        newer = TestDataFactory.create_product(name='Nuevo')
        TestDataFactory.create_product(name='Inactivo', active=False)
        response = self.client.get('/api/productos/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [p['id'] for p in response.data['data']]
        self.assertEqual(ids, [newer.id, older.id])

    def test_list_filters(self):
        TestDataFactory.create_product(name='Leche entera', category='Lácteos', stock=0, min_stock=5)
        TestDataFactory.create_product(name='Queso', category='Lácteos', stock=50, min_stock=5)
        TestDataFactory.create_product(name='Martillo', category='Herramientas', stock=50, min_stock=5)

        response = self.client.get('/api/productos/', {'search': 'leche'})
        self.assertEqual([p['name'] for p in response.data['data']], ['Leche entera'])

        response = self.client.get('/api/productos/', {'category': 'lácteos'})
        self.assertEqual(len(response.data['data']), 2)

        response = self.client.get('/api/productos/', {'stock_status': 'critical'})
        self.assertEqual([p['name'] for p in response.data['data']], ['Leche entera'])

    def test_update_product(self):
        product = TestDataFactory.create_product(price=Decimal('10.00'))
        response = self.client.put(f'/api/productos/{product.id}/', {'precio': '12.50', 'minStock': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(product.price, Decimal('12.50'))
        self.assertEqual(product.min_stock, 3)
        self.assertTrue(AuditLog.objects.filter(entity='productos', action=AuditLog.ACTION_UPDATE).exists())

    def test_delete_is_soft(self):
        product = TestDataFactory.create_product()
        response = self.client.delete(f'/api/productos/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertFalse(product.active)
        self.assertNotIn(product.id, [p['id'] for p in self.client.get('/api/productos/').data['data']])

    def test_unknown_product(self):
        response = self.client.get('/api/productos/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_alerts(self):
        critical = TestDataFactory.create_product(stock=1, min_stock=5, max_stock=100)
        warning = TestDataFactory.create_product(stock=6, min_stock=5, max_stock=100)
        excess = TestDataFactory.create_product(stock=99, min_stock=5, max_stock=100)
        TestDataFactory.create_product(stock=50, min_stock=5, max_stock=100)
        response = self.client.get('/api/productos/alertas/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual([p['id'] for p in data['critical']], [critical.id])
        self.assertEqual([p['id'] for p in data['warning']], [warning.id])
        self.assertEqual([p['id'] for p in data['excess']], [excess.id])


class ProductTenantScopeTests(TestCase):
    """Warehouse managers only see products of their warehouse"""

    def setUp(self):
        self.warehouse = TestDataFactory.create_warehouse()
        self.other_warehouse = TestDataFactory.create_warehouse()
        self.manager = TestDataFactory.create_user(role=User.ROLE_WAREHOUSE_MANAGER, warehouse=self.warehouse)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)
        self.own = TestDataFactory.create_product(warehouse=self.warehouse)
        self.shared = TestDataFactory.create_product(warehouse=self.other_warehouse)
        self.shared.warehouses.add(self.warehouse)
        self.foreign = TestDataFactory.create_product(warehouse=self.other_warehouse)

    def test_list_is_scoped(self):
        response = self.client.get('/api/productos/')
        self.assertEqual({p['id'] for p in response.data['data']}, {self.own.id, self.shared.id})

    def test_foreign_product_is_not_found(self):
        response = self.client.get(f'/api/productos/{self.foreign.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_sees_everything(self):
        self.client.authenticate_user(TestDataFactory.create_admin())
        response = self.client.get('/api/productos/')
        self.assertEqual(len(response.data['data']), 3)
