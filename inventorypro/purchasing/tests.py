"""
Comprehensive test suite for Purchasing module
Tests: purchase order creation, edits, state machine, completion side effects, stats
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from inventorypro.core.exceptions import InvalidStatusTransition
from inventorypro.core.models import AuditLog, User
from inventorypro.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventorypro.inventory.models import Movement
from inventorypro.purchasing.models import PurchaseOrder, PurchaseOrderItem
from inventorypro.purchasing.services import complete_purchase_order, transition_purchase_order


class PurchaseOrderModelTests(TestCase):
    """Test PurchaseOrder and PurchaseOrderItem model methods"""

    def setUp(self):
        self.supplier = TestDataFactory.create_supplier(name='Acme')
        self.product = TestDataFactory.create_product()

    def test_item_subtotal(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, items=[])
        item = PurchaseOrderItem.objects.create(
            purchase_order=order, product=self.product, quantity=3, price=Decimal('2.50')
        )
        self.assertEqual(item.subtotal, Decimal('7.50'))

    def test_items_total(self):
        order = TestDataFactory.create_purchase_order(
            supplier=self.supplier,
            items=[(self.product, 2, Decimal('10.00')), (self.product, 1, Decimal('5.00'))],
        )
        self.assertEqual(order.total_amount, Decimal('25.00'))

    def test_transitions(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier)
        self.assertTrue(order.can_transition_to(PurchaseOrder.STATUS_APPROVED))
        self.assertTrue(order.can_transition_to(PurchaseOrder.STATUS_REJECTED))
        self.assertFalse(order.can_transition_to(PurchaseOrder.STATUS_COMPLETED))

    def test_str(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier)
        self.assertEqual(str(order), f'OC-{order.id} (Acme)')


class PurchaseOrderAPITests(TestCase):
    """Test purchase order CRUD endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier(name='Acme')
        self.product = TestDataFactory.create_product(name='Clavos')

    def test_create_order_computes_total(self):
        data = {
            'supplier_id': self.supplier.id,
            'notes': 'Urgente',
            'items': [
                {'product_id': self.product.id, 'quantity': 10, 'price': '2.50'},
                {'productoId': self.product.id, 'cantidad': 2, 'precio': '1.00'},
            ],
        }
        response = self.client.post('/api/ordenes-compra/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = response.data['data']
        self.assertEqual(order['status'], 'pendiente')
        self.assertEqual(Decimal(order['total_amount']), Decimal('27.00'))
        self.assertEqual(order['supplier_name'], 'Acme')
        self.assertEqual(order['created_by'], self.user.id)
        self.assertEqual(len(order['items']), 2)
        self.assertEqual(order['items'][0]['product_name'], 'Clavos')
        self.assertTrue(AuditLog.objects.filter(entity='orden_compra', action=AuditLog.ACTION_CREATE).exists())

    def test_create_order_explicit_total(self):
        data = {
            'supplier_id': self.supplier.id,
            'total_amount': '100.00',
            'items': [{'product_id': self.product.id, 'quantity': 1, 'price': '2.00'}],
        }
        response = self.client.post('/api/ordenes-compra/', data, format='json')
        self.assertEqual(Decimal(response.data['data']['total_amount']), Decimal('100.00'))

    def test_create_order_incomplete(self):
        response = self.client.post('/api/ordenes-compra/', {'supplier_id': self.supplier.id, 'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Datos incompletos')
        response = self.client.post('/api/ordenes-compra/', {'items': [{'product_id': self.product.id}]}, format='json')
        self.assertEqual(response.data['message'], 'Datos incompletos')

    def test_create_order_rejects_zero_quantity(self):
        data = {'supplier_id': self.supplier.id, 'items': [{'product_id': self.product.id, 'quantity': 0, 'price': '1'}]}
        response = self.client.post('/api/ordenes-compra/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(PurchaseOrder.objects.count(), 0)

    def test_list_with_count_and_filters(self):
        TestDataFactory.create_purchase_order(supplier=self.supplier)
        TestDataFactory.create_purchase_order(supplier=self.supplier, status=PurchaseOrder.STATUS_APPROVED)
        TestDataFactory.create_purchase_order()

        response = self.client.get('/api/ordenes-compra/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)

        response = self.client.get('/api/ordenes-compra/', {'status': 'aprobada'})
        self.assertEqual(response.data['count'], 1)

        response = self.client.get(f'/api/ordenes-compra/proveedor/{self.supplier.id}/')
        self.assertEqual(response.data['count'], 2)

    def test_by_status(self):
        TestDataFactory.create_purchase_order(supplier=self.supplier)
        response = self.client.get('/api/ordenes-compra/estado/pendiente/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_by_invalid_status(self):
        response = self.client.get('/api/ordenes-compra/estado/perdida/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Estado inválido')

    def test_stats(self):
        TestDataFactory.create_purchase_order(supplier=self.supplier, items=[(self.product, 1, Decimal('10.00'))])
        TestDataFactory.create_purchase_order(
            supplier=self.supplier, items=[(self.product, 2, Decimal('10.00'))], status=PurchaseOrder.STATUS_REJECTED,
        )
        response = self.client.get('/api/ordenes-compra/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        stats = response.data['data']
        self.assertEqual(stats['total'], 2)
        self.assertEqual(stats['pendientes'], 1)
        self.assertEqual(stats['rechazadas'], 1)
        self.assertEqual(stats['aprobadas'], 0)
        self.assertEqual(stats['totalAmount'], 30.0)
        self.assertEqual(stats['thisMonth'], 2)

    def test_detail_unknown(self):
        response = self.client.get('/api/ordenes-compra/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_pending_replaces_items(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, items=[(self.product, 1, Decimal('5.00'))])
        other = TestDataFactory.create_product(name='Tuercas')
        data = {'notes': 'Cambio', 'items': [{'product_id': other.id, 'quantity': 4, 'price': '3.00'}]}
        response = self.client.put(f'/api/ordenes-compra/{order.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        order.refresh_from_db()
        self.assertEqual(order.notes, 'Cambio')
        self.assertEqual(order.total_amount, Decimal('12.00'))
        self.assertEqual(list(order.items.values_list('product_name', flat=True)), ['Tuercas'])

    def test_update_non_pending_rejected(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, status=PurchaseOrder.STATUS_APPROVED)
        response = self.client.put(f'/api/ordenes-compra/{order.id}/', {'notes': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Solo se pueden editar órdenes pendientes')

    def test_update_rejects_incomplete_items(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, items=[(self.product, 1, Decimal('5.00'))])
        other = TestDataFactory.create_product(name='Arandelas')
        response = self.client.put(f'/api/ordenes-compra/{order.id}/', {'items': [{'product_id': other.id}]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        order.refresh_from_db()
        self.assertEqual(order.total_amount, Decimal('5.00'))
        self.assertEqual(list(order.items.values_list('product_name', flat=True)), ['Clavos'])

    def test_update_rejects_empty_items(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier)
        response = self.client.patch(f'/api/ordenes-compra/{order.id}/', {'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(order.items.count(), 1)

    def test_list_rejects_invalid_filters(self):
        TestDataFactory.create_purchase_order(supplier=self.supplier)
        response = self.client.get('/api/ordenes-compra/', {'supplier': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/ordenes-compra/', {'estado': 'perdida'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_spanish_filters(self):
        TestDataFactory.create_purchase_order(supplier=self.supplier)
        TestDataFactory.create_purchase_order(status=PurchaseOrder.STATUS_REJECTED)
        response = self.client.get('/api/ordenes-compra/', {'proveedor': self.supplier.id, 'estado': 'pendiente'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_delete_requires_admin(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier)
        response = self.client.delete(f'/api/ordenes-compra/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(PurchaseOrder.objects.filter(pk=order.id).exists())

    def test_admin_deletes_pending_order(self):
        self.client.authenticate_user(TestDataFactory.create_admin())
        order = TestDataFactory.create_purchase_order(supplier=self.supplier)
        response = self.client.delete(f'/api/ordenes-compra/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(PurchaseOrder.objects.filter(pk=order.id).exists())
        self.assertTrue(AuditLog.objects.filter(entity='orden_compra', action=AuditLog.ACTION_DELETE).exists())

    def test_completed_order_cannot_be_deleted(self):
        self.client.authenticate_user(TestDataFactory.create_admin())
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, status=PurchaseOrder.STATUS_COMPLETED)
        response = self.client.delete(f'/api/ordenes-compra/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'No se pueden eliminar órdenes completadas')


class PurchaseOrderWorkflowTests(TestCase):
    """Test approve / reject / complete"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin(name='Admin')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.supplier = TestDataFactory.create_supplier(name='Acme')
        self.product_a = TestDataFactory.create_product(name='A', stock=5)
        self.product_b = TestDataFactory.create_product(name='B', stock=0)
        self.order = TestDataFactory.create_purchase_order(
            supplier=self.supplier,
            items=[(self.product_a, 10, Decimal('1.00')), (self.product_b, 3, Decimal('2.00'))],
        )

    def test_approve(self):
        response = self.client.patch(f'/api/ordenes-compra/{self.order.id}/aprobar/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, PurchaseOrder.STATUS_APPROVED)
        self.assertEqual(self.order.approved_by, self.admin)
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.ACTION_APPROVE, entity_id=str(self.order.id)).exists())

    def test_reject(self):
        response = self.client.patch(f'/api/ordenes-compra/{self.order.id}/rechazar/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, PurchaseOrder.STATUS_REJECTED)

    def test_employee_cannot_approve(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.patch(f'/api/ordenes-compra/{self.order.id}/aprobar/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_approve_twice_conflicts(self):
        self.client.patch(f'/api/ordenes-compra/{self.order.id}/aprobar/')
        response = self.client.patch(f'/api/ordenes-compra/{self.order.id}/aprobar/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_complete_pending_conflicts(self):
        response = self.client.patch(f'/api/ordenes-compra/{self.order.id}/completar/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.product_a.refresh_from_db()
        self.assertEqual(self.product_a.stock, 5)

    def test_complete_receives_stock(self):
        self.client.patch(f'/api/ordenes-compra/{self.order.id}/aprobar/')
        response = self.client.patch(f'/api/ordenes-compra/{self.order.id}/completar/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], PurchaseOrder.STATUS_COMPLETED)

        self.order.refresh_from_db()
        self.assertIsNotNone(self.order.completed_at)
        self.product_a.refresh_from_db()
        self.product_b.refresh_from_db()
        self.assertEqual(self.product_a.stock, 15)
        self.assertEqual(self.product_b.stock, 3)

        movements = Movement.objects.filter(purchase_order=self.order)
        self.assertEqual(movements.count(), 2)
        for movement in movements:
            self.assertEqual(movement.type, Movement.TYPE_ENTRY)
            self.assertEqual(movement.observation, f'Orden de compra #{self.order.id} - Acme')
            self.assertEqual(movement.reason, 'Recepción de orden de compra')
            self.assertEqual(movement.user, self.admin)
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.ACTION_COMPLETE).exists())

    def test_warehouse_manager_can_complete(self):
        transition_purchase_order(self.order, PurchaseOrder.STATUS_APPROVED, self.admin)
        manager = TestDataFactory.create_user(role=User.ROLE_WAREHOUSE_MANAGER)
        self.client.authenticate_user(manager)
        response = self.client.patch(f'/api/ordenes-compra/{self.order.id}/completar/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_completed_order_is_final(self):
        transition_purchase_order(self.order, PurchaseOrder.STATUS_APPROVED, self.admin)
        complete_purchase_order(self.order, self.admin)
        with self.assertRaises(InvalidStatusTransition):
            complete_purchase_order(self.order, self.admin)
        with self.assertRaises(InvalidStatusTransition):
            transition_purchase_order(self.order, PurchaseOrder.STATUS_REJECTED, self.admin)
        self.product_a.refresh_from_db()
        self.assertEqual(self.product_a.stock, 15)

    def test_rejected_order_cannot_be_approved(self):
        transition_purchase_order(self.order, PurchaseOrder.STATUS_REJECTED, self.admin)
        response = self.client.patch(f'/api/ordenes-compra/{self.order.id}/aprobar/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
