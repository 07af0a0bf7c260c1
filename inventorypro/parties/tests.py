"""
Test suite for Parties module
Tests: supplier CRUD, search, soft delete, supplier products
"""
from django.test import TestCase
from rest_framework import status
from inventorypro.core.models import AuditLog
from inventorypro.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventorypro.parties.models import Supplier


class SupplierAPITests(TestCase):
    """Test /api/proveedores/ endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_supplier(self):
        data = {
            'nombre': 'Distribuidora Andina', 'contacto': 'Laura', 'correo': 'ventas@andina.com',
            'telefono': '6011234567', 'nit': '900123456-7', 'direccion': 'Cra 7 # 10-20',
        }
        response = self.client.post('/api/proveedores/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        supplier = Supplier.objects.get(nit='900123456-7')
        self.assertEqual(supplier.name, 'Distribuidora Andina')
        self.assertEqual(supplier.email, 'ventas@andina.com')
        self.assertTrue(AuditLog.objects.filter(entity='proveedores', entity_id=str(supplier.id)).exists())

    def test_create_supplier_requires_name(self):
        response = self.client.post('/api/proveedores/', {'contacto': 'Laura'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('errors', response.data)

    def test_search(self):
        TestDataFactory.create_supplier(name='Lácteos del Valle')
        TestDataFactory.create_supplier(name='Ferretería Central')
        response = self.client.get('/api/proveedores/', {'search': 'valle'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['name'] for s in response.data['data']], ['Lácteos del Valle'])

    def test_update_supplier(self):
        supplier = TestDataFactory.create_supplier()
        response = self.client.patch(f'/api/proveedores/{supplier.id}/', {'telefono': '999'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        supplier.refresh_from_db()
        self.assertEqual(supplier.phone, '999')

    def test_delete_is_soft(self):
        supplier = TestDataFactory.create_supplier()
        response = self.client.delete(f'/api/proveedores/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        supplier.refresh_from_db()
        self.assertFalse(supplier.active)
        self.assertTrue(AuditLog.objects.filter(entity='proveedores', action=AuditLog.ACTION_DELETE).exists())

    def test_supplier_products(self):
        supplier = TestDataFactory.create_supplier()
        product = TestDataFactory.create_product(supplier=supplier)
        TestDataFactory.create_product(supplier=supplier, active=False)
        TestDataFactory.create_product()
        response = self.client.get(f'/api/proveedores/{supplier.id}/productos/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['id'] for p in response.data['data']], [product.id])

    def test_unknown_supplier(self):
        response = self.client.get('/api/proveedores/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
