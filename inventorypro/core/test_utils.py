"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from inventorypro.locations.models import Warehouse
from inventorypro.catalog.models import Product
from inventorypro.parties.models import Supplier
from inventorypro.purchasing.models import PurchaseOrder, PurchaseOrderItem
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(email=None, password='testpass123', name=None, role=User.ROLE_EMPLOYEE,
                    warehouse=None, is_active=True, is_superuser=False):
        """Create a test user"""
        if not email:
            email = f'user_{TestDataFactory.random_string(6).lower()}@test.com'
        return User.objects.create_user(
            email=email,
            password=password,
            name=name or f'Usuario {TestDataFactory.random_string(4)}',
            role=role,
            warehouse=warehouse,
            is_active=is_active,
            is_superuser=is_superuser,
        )

    @staticmethod
    def create_admin(**kwargs):
        kwargs.setdefault('role', User.ROLE_ADMIN)
        return TestDataFactory.create_user(**kwargs)

    @staticmethod
    def create_warehouse(name=None, location='Bogotá', capacity=1000, active=True):
        """Create a test warehouse"""
        return Warehouse.objects.create(
            name=name or f'Bodega_{TestDataFactory.random_string(6)}',
            location=location,
            capacity=capacity,
            manager='Encargado',
            active=active,
        )

    @staticmethod
    def create_supplier(name=None, email=None, active=True):
        """Create a test supplier"""
        if not name:
            name = f'Proveedor_{TestDataFactory.random_string(6)}'
        return Supplier.objects.create(
            name=name,
            contact='Contacto',
            email=email or f'{TestDataFactory.random_string(6).lower()}@proveedor.com',
            phone='3001234567',
            nit=f'900{random.randint(100000, 999999)}-1',
            address='Calle 1 # 2-3',
            active=active,
        )

    @staticmethod
    def create_product(name=None, code=None, price=Decimal('10.00'), stock=0, min_stock=0, max_stock=100,
                       category='General', supplier=None, warehouse=None, active=True):
        """Create a test product"""
        if not name:
            name = f'Producto_{TestDataFactory.random_string(6)}'
        if not code:
            code = f'COD_{TestDataFactory.random_string(8)}'
        return Product.objects.create(
            name=name,
            code=code,
            price=price,
            stock=stock,
            min_stock=min_stock,
            max_stock=max_stock,
            category=category,
            supplier=supplier,
            supplier_name=supplier.name if supplier else '',
            warehouse=warehouse,
            active=active,
        )

    @staticmethod
    def create_purchase_order(supplier=None, user=None, items=None, status=PurchaseOrder.STATUS_PENDING):
        """
        Create a purchase order.
        `items` is a list of (product, quantity, price) tuples; one item is created when omitted.
        """
        if not supplier:
            supplier = TestDataFactory.create_supplier()
        if items is None:
            items = [(TestDataFactory.create_product(supplier=supplier), 5, Decimal('10.00'))]
        order = PurchaseOrder.objects.create(
            supplier=supplier,
            supplier_name=supplier.name,
            status=status,
            created_by=user,
        )
        for product, quantity, price in items:
            PurchaseOrderItem.objects.create(
                purchase_order=order,
                product=product,
                product_name=product.name,
                quantity=quantity,
                price=price,
            )
        order.total_amount = order.get_items_total()
        order.save(update_fields=['total_amount'])
        return order


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
