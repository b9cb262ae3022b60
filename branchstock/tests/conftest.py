"""
Pytest fixtures for Branchstock tests.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from branchstock import inventory
from branchstock.models import Branch, MovementKind, Product, Provider


User = get_user_model()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='cajero',
        password='testpass123'
    )


@pytest.fixture
def matriz(db):
    """Primary branch."""
    return Branch.objects.create(code='matriz', name='Matriz Centro', is_primary=True)


@pytest.fixture
def norte(db):
    """Secondary branch."""
    return Branch.objects.create(code='norte', name='Sucursal Norte')


@pytest.fixture
def provider(db):
    """Provider B001 with EAN global id 55 and four SKUs already issued."""
    return Provider.objects.create(
        name='Boutique Bella',
        visual_code='B001',
        letter_prefix='B',
        letter_sequence=1,
        ean_global_id=55,
        last_sku_sequence=4,
    )


@pytest.fixture
def other_provider(db):
    """A second provider (letter A)."""
    return Provider.objects.create(
        name='Artesanías Sol',
        visual_code='A001',
        letter_prefix='A',
        letter_sequence=1,
        ean_global_id=12,
        last_sku_sequence=0,
    )


@pytest.fixture
def product(db, provider):
    """Provider product priced at 250."""
    return Product.objects.create(
        provider=provider,
        name='Blusa Bordada',
        sku='B001-00001',
        barcode='2005500001005',
        sale_price=Decimal('250.00'),
        cost_price=Decimal('120.00'),
    )


@pytest.fixture
def product2(db, provider):
    """Second product from the same provider."""
    return Product.objects.create(
        provider=provider,
        name='Collar de Chaquira',
        sku='B001-00002',
        sale_price=Decimal('180.00'),
        cost_price=Decimal('90.00'),
    )


@pytest.fixture
def foreign_product(db, other_provider):
    """Product belonging to another provider."""
    return Product.objects.create(
        provider=other_provider,
        name='Jarrón de Barro',
        sku='A001-00001',
        sale_price=Decimal('300.00'),
    )


@pytest.fixture
def stocked(matriz, product, product2):
    """10 units of product and 5 of product2 at matriz."""
    inventory.adjust(product, matriz, 10, kind=MovementKind.ADJUSTMENT, reason='Inventario inicial')
    inventory.adjust(product2, matriz, 5, kind=MovementKind.ADJUSTMENT, reason='Inventario inicial')
    return {'product': product, 'product2': product2, 'branch': matriz}
