"""
Tests for read-only inventory queries.
"""

import pytest

from branchstock import inventory
from branchstock.exceptions import ValidationError
from branchstock.models import Branch


pytestmark = pytest.mark.django_db


class TestResolveBranch:

    def test_defaults_to_primary(self, matriz, norte):
        assert inventory.resolve_branch() == matriz

    def test_explicit_branch(self, matriz, norte):
        assert inventory.resolve_branch(norte) == norte
        assert inventory.resolve_branch(norte.pk) == norte

    def test_no_primary(self, norte):
        with pytest.raises(ValidationError) as exc:
            inventory.resolve_branch()
        assert exc.value.code == 'NO_PRIMARY_BRANCH'

    def test_inactive_branch(self, matriz):
        closed = Branch.objects.create(code='cerrada', name='Cerrada', is_active=False)
        with pytest.raises(ValidationError) as exc:
            inventory.resolve_branch(closed)
        assert exc.value.code == 'BRANCH_NOT_FOUND'


class TestBranchInventory:

    def test_all_active_products_with_zero_default(self, stocked, norte, foreign_product):
        inventory.adjust(stocked['product'], norte, 3, reason='Entrada')

        views = inventory.branch_inventory(norte)

        quantities = {view.product.pk: view.quantity for view in views}
        assert quantities == {
            stocked['product'].pk: 3,
            stocked['product2'].pk: 0,
            foreign_product.pk: 0,
        }
        assert all(view.branch == norte for view in views)

    def test_provider_filter(self, stocked, matriz, provider, foreign_product):
        views = inventory.branch_inventory(matriz, provider=provider)
        assert {view.product for view in views} == {stocked['product'], stocked['product2']}

    def test_in_stock_only(self, stocked, matriz):
        inventory.adjust(stocked['product2'], matriz, -5, reason='Venta')

        views = inventory.branch_inventory(matriz, in_stock_only=True)

        assert [(view.product, view.quantity) for view in views] == [(stocked['product'], 10)]

    def test_inactive_products_hidden(self, stocked, matriz):
        product2 = stocked['product2']
        product2.is_active = False
        product2.save()

        assert [view.product for view in inventory.branch_inventory(matriz)] == [stocked['product']]

    def test_total_on_hand(self, stocked, norte):
        inventory.adjust(stocked['product'], norte, 3, reason='Entrada')
        assert inventory.total_on_hand(stocked['product']) == 13
        assert inventory.total_on_hand(stocked['product'].pk) == 13
