"""
Test suite for the core module
Tests: registration, login, users, audit log, field translation, exception envelope
"""
from datetime import timedelta
from io import StringIO
from unittest.mock import patch
from django.core.management import call_command
from django.test import TestCase, RequestFactory
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import NotFound
from inventorypro.core.exceptions import envelope_exception_handler, InsufficientStock
from inventorypro.core.models import User, AuditLog
from inventorypro.core.permissions import scoped_warehouse_id
from inventorypro.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventorypro.core.translation import translate_fields
from inventorypro.core.utils import record_audit, get_client_ip


class RegisterTests(TestCase):
    """Test POST /api/auth/register/"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_register_with_spanish_fields(self):
        data = {'nombre': 'Ana Pérez', 'email': 'ana@test.com', 'password': 'secreto1', 'rol': 'auditor'}
        response = self.client.post('/api/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['user']['name'], 'Ana Pérez')
        self.assertEqual(response.data['user']['role'], User.ROLE_AUDITOR)
        self.assertNotIn('password', response.data['user'])
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.ACTION_REGISTER, entity='usuarios').exists())

    def test_register_defaults_to_employee(self):
        data = {'name': 'Luis', 'email': 'luis@test.com', 'password': 'secreto1'}
        response = self.client.post('/api/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(email='luis@test.com').role, User.ROLE_EMPLOYEE)

    def test_register_missing_fields(self):
        response = self.client.post('/api/auth/register/', {'email': 'x@test.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])

    def test_register_short_password(self):
        data = {'name': 'Luis', 'email': 'luis@test.com', 'password': '123'}
        response = self.client.post('/api/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('6', response.data['message'])

    def test_register_duplicate_email(self):
        TestDataFactory.create_user(email='dup@test.com')
        data = {'name': 'Otro', 'email': 'dup@test.com', 'password': 'secreto1'}
        response = self.client.post('/api/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['message'], 'El email ya está registrado')


class LoginTests(TestCase):
    """Test POST /api/auth/login/ and logout"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.user = TestDataFactory.create_user(email='login@test.com', password='secreto1')

    def test_login_success(self):
        response = self.client.post('/api/auth/login/', {'email': 'login@test.com', 'password': 'secreto1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['email'], 'login@test.com')
        self.assertIn('access', response.data)
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.ACTION_LOGIN, user=self.user).exists())

    def test_login_missing_fields(self):
        response = self.client.post('/api/auth/login/', {'email': 'login@test.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login_wrong_password(self):
        response = self.client.post('/api/auth/login/', {'email': 'login@test.com', 'password': 'nope123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_unknown_email(self):
        response = self.client.post('/api/auth/login/', {'email': 'ghost@test.com', 'password': 'secreto1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_inactive_user(self):
        self.user.is_active = False
        self.user.save()
        response = self.client.post('/api/auth/login/', {'email': 'login@test.com', 'password': 'secreto1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_login_token_grants_access(self):
        response = self.client.post('/api/auth/login/', {'email': 'login@test.com', 'password': 'secreto1'}, format='json')
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        me = self.client.get('/api/auth/me/')
        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.data['data']['id'], self.user.id)

    def test_logout_is_audited(self):
        self.client.authenticate_user(self.user)
        response = self.client.post('/api/auth/logout/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.ACTION_LOGOUT, user=self.user).exists())

    def test_me_requires_authentication(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_auth_user_detail_unknown(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/auth/user/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class UserAPITests(TestCase):
    """Test /api/usuarios/ endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_list_users_newest_first(self):
        TestDataFactory.create_user()
        response = self.client.get('/api/usuarios/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertGreaterEqual(len(response.data['data']), 2)
        dates = [user['created_at'] for user in response.data['data']]
        self.assertEqual(dates, sorted(dates, reverse=True))

    def test_non_admin_cannot_list_users(self):
        employee = TestDataFactory.create_user()
        self.client.authenticate_user(employee)
        response = self.client.get('/api/usuarios/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_user_hashes_password(self):
        warehouse = TestDataFactory.create_warehouse()
        data = {
            'nombre': 'Encargado', 'email': 'enc@test.com', 'password': 'secreto1',
            'rol': User.ROLE_WAREHOUSE_MANAGER, 'bodega_id': warehouse.id,
        }
        response = self.client.post('/api/usuarios/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(email='enc@test.com')
        self.assertNotEqual(user.password, 'secreto1')
        self.assertTrue(user.check_password('secreto1'))
        self.assertEqual(user.warehouse, warehouse)
        self.assertNotIn('password', response.data['data'])

    def test_create_user_duplicate_email(self):
        TestDataFactory.create_user(email='taken@test.com')
        data = {'name': 'X', 'email': 'taken@test.com', 'password': 'secreto1'}
        response = self.client.post('/api/usuarios/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_update_user_rehashes_password(self):
        user = TestDataFactory.create_user(password='viejo123')
        response = self.client.put(f'/api/usuarios/{user.id}/', {'password': 'nuevo123', 'nombre': 'Nuevo'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertTrue(user.check_password('nuevo123'))
        self.assertEqual(user.name, 'Nuevo')
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.ACTION_UPDATE, entity_id=str(user.id)).exists())

    def test_delete_user_is_soft(self):
        user = TestDataFactory.create_user()
        response = self.client.delete(f'/api/usuarios/{user.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertFalse(user.is_active)
        self.assertFalse(response.data['data']['active'])
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.ACTION_DELETE, entity='usuarios').exists())

    def test_get_unknown_user(self):
        response = self.client.get('/api/usuarios/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Recurso no encontrado')


class AuditLogAPITests(TestCase):
    """Test /api/auditoria/ endpoints"""

    def setUp(self):
        self.auditor = TestDataFactory.create_user(role=User.ROLE_AUDITOR)
        self.other = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.auditor)
        record_audit(user=self.auditor, action='CREAR', entity='productos', entity_id=1, details='a')
        record_audit(user=self.other, action='ACTUALIZAR', entity='productos', entity_id=1, details='b')
        record_audit(user=self.other, action='ELIMINAR', entity='proveedores', entity_id=7, details='c')

    def test_list_newest_first(self):
        response = self.client.get('/api/auditoria/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['details'] for row in response.data['data']], ['c', 'b', 'a'])

    def test_filter_by_spanish_params(self):
        response = self.client.get('/api/auditoria/', {'usuarioId': self.other.id, 'entidad': 'productos'})
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['action'], 'ACTUALIZAR')

    def test_filter_by_action_and_limit(self):
        response = self.client.get('/api/auditoria/', {'accion': 'crear'})
        self.assertEqual(len(response.data['data']), 1)
        response = self.client.get('/api/auditoria/', {'limit': 2})
        self.assertEqual(len(response.data['data']), 2)

    def test_filter_by_date_range(self):
        future = (timezone.now() + timedelta(days=1)).isoformat()
        response = self.client.get('/api/auditoria/', {'fechaInicio': future})
        self.assertEqual(response.data['data'], [])

    def test_entity_history(self):
        response = self.client.get('/api/auditoria/entidad/productos/1/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 2)

    def test_user_activity(self):
        response = self.client.get(f'/api/auditoria/usuario/{self.other.id}/')
        self.assertEqual(len(response.data['data']), 2)

    def test_detail_unknown(self):
        response = self.client.get('/api/auditoria/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_employee_cannot_read_audit(self):
        self.client.authenticate_user(self.other)
        response = self.client.get('/api/auditoria/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class CoreUtilsTests(TestCase):
    """Test audit helpers, translation and the exception envelope"""

    def test_record_audit_snapshots_user_and_ip(self):
        user = TestDataFactory.create_user(name='Marta')
        request = RequestFactory().get('/', HTTP_X_FORWARDED_FOR='10.0.0.1, 10.0.0.2')
        request.user = user
        log = record_audit(request=request, action='CREAR', entity='bodegas', entity_id=3, details='x')
        self.assertEqual(log.user_name, 'Marta')
        self.assertEqual(log.ip_address, '10.0.0.1')
        self.assertEqual(log.entity_id, '3')

    def test_has_role(self):
        auditor = TestDataFactory.create_user(role=User.ROLE_AUDITOR)
        superuser = TestDataFactory.create_user(role=User.ROLE_EMPLOYEE, is_superuser=True)
        self.assertTrue(auditor.has_role(User.ROLE_ADMIN, User.ROLE_AUDITOR))
        self.assertFalse(auditor.has_role(User.ROLE_ADMIN))
        self.assertTrue(superuser.has_role(User.ROLE_ADMIN))

    def test_record_audit_swallows_write_errors(self):
        user = TestDataFactory.create_user()
        request = RequestFactory().get('/')
        request.user = user
        with patch.object(AuditLog.objects, 'create', side_effect=RuntimeError('audit table locked')):
            with self.assertLogs('inventorypro.core.utils', level='ERROR'):
                log = record_audit(request=request, action='CREAR', entity='bodegas', entity_id=1)
        self.assertIsNone(log)

    def test_audit_failure_keeps_movement(self):
        user = TestDataFactory.create_user()
        product = TestDataFactory.create_product(stock=10)
        client = AuthenticatedAPIClient()
        client.authenticate_user(user)
        data = {'tipo': 'entrada', 'producto_id': product.id, 'cantidad': 5}
        with patch.object(AuditLog.objects, 'create', side_effect=RuntimeError('audit table locked')):
            response = client.post('/api/movimientos/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['nuevoStock'], 15)
        product.refresh_from_db()
        self.assertEqual(product.stock, 15)
        self.assertEqual(product.movements.count(), 1)
        self.assertFalse(AuditLog.objects.exists())

    def test_record_audit_skips_incomplete_entries(self):
        self.assertIsNone(record_audit(action='CREAR', entity='bodegas', entity_id=None))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_get_client_ip_remote_addr(self):
        request = RequestFactory().get('/', REMOTE_ADDR='192.168.1.5')
        self.assertEqual(get_client_ip(request), '192.168.1.5')

    def test_translate_fields_canonical_wins(self):
        data = translate_fields({'nombre': 'A', 'name': 'B', 'precio': 3}, {'nombre': 'name', 'precio': 'price'})
        self.assertEqual(data, {'name': 'B', 'price': 3})

    def test_envelope_for_api_exception(self):
        response = envelope_exception_handler(InsufficientStock(), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'success': False, 'message': 'Stock insuficiente para realizar la salida'})

    def test_envelope_for_unexpected_exception(self):
        response = envelope_exception_handler(RuntimeError('db down'), {})
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'db down')

    def test_envelope_for_not_found(self):
        response = envelope_exception_handler(NotFound('Producto no encontrado'), {})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Producto no encontrado')

    def test_scoped_warehouse_only_for_managers(self):
        warehouse = TestDataFactory.create_warehouse()
        manager = TestDataFactory.create_user(role=User.ROLE_WAREHOUSE_MANAGER, warehouse=warehouse)
        employee = TestDataFactory.create_user(warehouse=warehouse)
        self.assertEqual(scoped_warehouse_id(manager), warehouse.id)
        self.assertIsNone(scoped_warehouse_id(employee))


class SeedAdminCommandTests(TestCase):
    """Test the seed_admin management command"""

    def test_creates_admin(self):
        call_command('seed_admin', email='root@test.com', password='secreto1', name='Root', stdout=StringIO())
        user = User.objects.get(email='root@test.com')
        self.assertEqual(user.role, User.ROLE_ADMIN)
        self.assertTrue(user.check_password('secreto1'))

    def test_resets_existing_password(self):
        TestDataFactory.create_user(email='root@test.com', password='viejo123')
        call_command('seed_admin', email='root@test.com', password='nuevo123', stdout=StringIO())
        user = User.objects.get(email='root@test.com')
        self.assertTrue(user.check_password('nuevo123'))
        self.assertEqual(user.role, User.ROLE_ADMIN)
