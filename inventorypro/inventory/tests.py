"""
Test suite for Inventory module
Tests: stock arithmetic, movement registration, movement API, filters, audit trail
"""
from django.test import TestCase
from rest_framework import status
from inventorypro.core.exceptions import InsufficientStock, InvalidMovementType
from inventorypro.core.models import AuditLog, User
from inventorypro.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventorypro.inventory.models import Movement
from inventorypro.inventory.services import compute_new_stock, register_movement


class ComputeNewStockTests(TestCase):
    """Test stock arithmetic per movement type"""

    def test_entrada_adds(self):
        self.assertEqual(compute_new_stock(10, 'entrada', 5), 15)

    def test_devolucion_adds(self):
        self.assertEqual(compute_new_stock(10, 'devolucion', 3), 13)

    def test_salida_subtracts(self):
        self.assertEqual(compute_new_stock(10, 'salida', 10), 0)

    def test_salida_below_zero(self):
        with self.assertRaises(InsufficientStock):
            compute_new_stock(3, 'salida', 4)

    def test_ajuste_sets_absolute_value(self):
        self.assertEqual(compute_new_stock(10, 'ajuste', 4), 4)
        self.assertEqual(compute_new_stock(10, 'ajuste', 0), 0)

    def test_unknown_type(self):
        with self.assertRaises(InvalidMovementType):
            compute_new_stock(10, 'robo', 1)


class RegisterMovementTests(TestCase):
    """Test register_movement side effects"""

    def setUp(self):
        self.user = TestDataFactory.create_user(name='Operario')
        self.product = TestDataFactory.create_product(name='Tornillo', stock=10)

    def test_updates_stock_and_records_snapshot(self):
        warehouse = TestDataFactory.create_warehouse(name='Central')
        movement = register_movement(self.product, 'salida', 4, user=self.user, warehouse=warehouse, lot_number='L1')
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 6)
        self.assertEqual(movement.previous_stock, 10)
        self.assertEqual(movement.new_stock, 6)
        self.assertEqual(movement.product_name, 'Tornillo')
        self.assertEqual(movement.user_name, 'Operario')
        self.assertEqual(movement.warehouse_name, 'Central')
        self.assertEqual(movement.lot_number, 'L1')

    def test_insufficient_stock_changes_nothing(self):
        with self.assertRaises(InsufficientStock):
            register_movement(self.product, 'salida', 11, user=self.user)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 10)
        self.assertEqual(Movement.objects.count(), 0)

    def test_accepts_product_id(self):
        movement = register_movement(self.product.id, 'entrada', 5)
        self.assertEqual(movement.new_stock, 15)
        self.assertEqual(movement.user_name, '')


class MovementAPITests(TestCase):
    """Test /api/movimientos/ endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(name='Operario')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(name='Cemento', stock=20)

    def test_create_entrada_with_spanish_fields(self):
        data = {'tipo': 'entrada', 'producto_id': self.product.id, 'cantidad': 5, 'observacion': 'Compra local'}
        response = self.client.post('/api/movimientos/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['nuevoStock'], 25)
        movement = response.data['data']['movimiento']
        self.assertEqual(movement['type'], 'entrada')
        self.assertEqual(movement['user'], self.user.id)
        self.assertEqual(movement['observation'], 'Compra local')
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 25)

    def test_create_is_audited(self):
        data = {'type': 'salida', 'productId': self.product.id, 'quantity': 3}
        response = self.client.post('/api/movimientos/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        log = AuditLog.objects.get(action='MOVIMIENTO_SALIDA')
        self.assertEqual(log.entity, 'movimientos')
        self.assertEqual(log.user, self.user)
        self.assertEqual(log.details, 'salida de 3 unidades de Cemento. Nuevo stock: 17')

    def test_salida_insufficient_stock(self):
        data = {'tipo': 'salida', 'producto_id': self.product.id, 'cantidad': 21}
        response = self.client.post('/api/movimientos/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Stock insuficiente para realizar la salida')
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 20)
        self.assertFalse(AuditLog.objects.filter(entity='movimientos').exists())

    def test_ajuste_to_zero(self):
        data = {'tipo': 'ajuste', 'producto_id': self.product.id, 'cantidad': 0, 'motivo': 'Conteo físico'}
        response = self.client.post('/api/movimientos/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['nuevoStock'], 0)

    def test_zero_quantity_rejected_for_entrada(self):
        data = {'tipo': 'entrada', 'producto_id': self.product.id, 'cantidad': 0}
        response = self.client.post('/api/movimientos/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_negative_quantity_rejected(self):
        data = {'tipo': 'entrada', 'producto_id': self.product.id, 'cantidad': -2}
        response = self.client.post('/api/movimientos/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_fields(self):
        response = self.client.post('/api/movimientos/', {'tipo': 'entrada'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Tipo, producto y cantidad son requeridos')

    def test_invalid_type(self):
        data = {'tipo': 'robo', 'producto_id': self.product.id, 'cantidad': 1}
        response = self.client.post('/api/movimientos/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Tipo de movimiento no válido')

    def test_unknown_product(self):
        data = {'tipo': 'entrada', 'producto_id': 99999, 'cantidad': 1}
        response = self.client.post('/api/movimientos/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_filters_newest_first(self):
        other = TestDataFactory.create_product(stock=5)
        first = register_movement(self.product, 'entrada', 1, user=self.user)
        second = register_movement(self.product, 'salida', 1, user=self.user)
        register_movement(other, 'entrada', 1)

        response = self.client.get('/api/movimientos/', {'productoId': self.product.id})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([m['id'] for m in response.data['data']], [second.id, first.id])

        response = self.client.get('/api/movimientos/', {'tipo': 'salida'})
        self.assertEqual([m['id'] for m in response.data['data']], [second.id])

        response = self.client.get('/api/movimientos/', {'usuarioId': self.user.id})
        self.assertEqual(len(response.data['data']), 2)

    def test_detail(self):
        movement = register_movement(self.product, 'entrada', 2)
        response = self.client.get(f'/api/movimientos/{movement.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['new_stock'], 22)
        self.assertEqual(self.client.get('/api/movimientos/99999/').status_code, status.HTTP_404_NOT_FOUND)

    def test_manager_cannot_move_foreign_product(self):
        warehouse = TestDataFactory.create_warehouse()
        manager = TestDataFactory.create_user(role=User.ROLE_WAREHOUSE_MANAGER, warehouse=warehouse)
        self.client.authenticate_user(manager)
        data = {'tipo': 'entrada', 'producto_id': self.product.id, 'cantidad': 1}
        response = self.client.post('/api/movimientos/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_soft_deleted_product_rejects_movements(self):
        self.client.delete(f'/api/productos/{self.product.id}/')
        data = {'tipo': 'entrada', 'producto_id': self.product.id, 'cantidad': 5}
        response = self.client.post('/api/movimientos/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 20)
        self.assertEqual(Movement.objects.count(), 0)
