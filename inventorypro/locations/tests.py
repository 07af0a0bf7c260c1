"""
Test suite for Locations module
Tests: warehouse CRUD, soft delete, role restrictions, warehouse products
"""
from django.test import TestCase
from rest_framework import status
from inventorypro.core.models import AuditLog, User
from inventorypro.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventorypro.locations.models import Warehouse


class WarehouseAPITests(TestCase):
    """Test /api/bodegas/ endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_warehouse_with_spanish_fields(self):
        data = {'nombre': 'Bodega Norte', 'ubicacion': 'Medellín', 'capacidad': 500, 'encargado': 'Carlos'}
        response = self.client.post('/api/bodegas/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        warehouse = Warehouse.objects.get(name='Bodega Norte')
        self.assertEqual(warehouse.location, 'Medellín')
        self.assertEqual(warehouse.capacity, 500)
        self.assertTrue(AuditLog.objects.filter(entity='bodegas', action=AuditLog.ACTION_CREATE).exists())

    def test_list_ordered_by_name(self):
        TestDataFactory.create_warehouse(name='Zeta')
        TestDataFactory.create_warehouse(name='Alfa')
        response = self.client.get('/api/bodegas/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([w['name'] for w in response.data['data']], ['Alfa', 'Zeta'])

    def test_update_warehouse(self):
        warehouse = TestDataFactory.create_warehouse()
        response = self.client.put(f'/api/bodegas/{warehouse.id}/', {'capacidad': 42}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        warehouse.refresh_from_db()
        self.assertEqual(warehouse.capacity, 42)

    def test_delete_is_soft(self):
        warehouse = TestDataFactory.create_warehouse()
        response = self.client.delete(f'/api/bodegas/{warehouse.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        warehouse.refresh_from_db()
        self.assertFalse(warehouse.active)

    def test_unknown_warehouse(self):
        response = self.client.get('/api/bodegas/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_employee_can_read_but_not_write(self):
        employee = TestDataFactory.create_user(role=User.ROLE_EMPLOYEE)
        self.client.authenticate_user(employee)
        self.assertEqual(self.client.get('/api/bodegas/').status_code, status.HTTP_200_OK)
        response = self.client.post('/api/bodegas/', {'nombre': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_warehouse_products_includes_secondary_assignment(self):
        warehouse = TestDataFactory.create_warehouse()
        primary = TestDataFactory.create_product(warehouse=warehouse)
        secondary = TestDataFactory.create_product()
        secondary.warehouses.add(warehouse)
        TestDataFactory.create_product(warehouse=warehouse, active=False)
        TestDataFactory.create_product()

        response = self.client.get(f'/api/bodegas/{warehouse.id}/productos/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({p['id'] for p in response.data['data']}, {primary.id, secondary.id})
