"""
Tests for supply intake (receive_batch, merge, receipts, history).
"""

from datetime import date
from decimal import Decimal

import pytest
from django.test import override_settings

from branchstock import inventory
from branchstock.exceptions import ValidationError
from branchstock.models import Movement, MovementKind, SupplyBatch, SupplyLineItem
from branchstock.services import IntakeLine


pytestmark = pytest.mark.django_db


class TestReceiveBatch:

    def test_new_batch(self, provider, matriz, product, product2, user):
        receipt = inventory.receive_batch(provider, matriz, '20250301-BELLA', [
            IntakeLine(product_id=product.pk, quantity=10, unit_cost=Decimal('120')),
            IntakeLine(product_id=product2.pk, quantity=4, unit_cost=Decimal('90.50')),
        ], user=user)

        assert receipt.merged is False
        assert receipt.batch.total_cost == Decimal('1562.00')
        assert receipt.total_units == 14
        assert len(receipt.lines) == 2
        assert inventory.get(product, matriz) == 10
        assert inventory.get(product2, matriz) == 4

        movement = Movement.objects.filter(record__product=product).get()
        assert movement.kind == MovementKind.SUPPLY
        assert movement.reference == receipt.batch
        assert movement.user == user

    def test_batch_code_is_stripped(self, provider, matriz, product):
        receipt = inventory.receive_batch(provider, matriz, '  L-01  ', [
            IntakeLine(product.pk, 1, Decimal('100')),
        ])
        assert receipt.batch.batch_code == 'L-01'

    def test_same_code_merges(self, provider, matriz, product, product2):
        inventory.receive_batch(provider, matriz, 'L-01', [
            IntakeLine(product.pk, 10, Decimal('100')),
        ])
        receipt = inventory.receive_batch(provider, matriz, ' L-01', [
            IntakeLine(product.pk, 2, Decimal('110')),
            IntakeLine(product2.pk, 3, Decimal('50')),
        ])

        assert receipt.merged is True
        assert SupplyBatch.objects.count() == 1
        assert receipt.batch.total_cost == Decimal('1370.00')
        assert len(receipt.lines) == 3
        assert SupplyLineItem.objects.filter(batch=receipt.batch).count() == 3
        assert inventory.get(product, matriz) == 12
        assert inventory.get(product2, matriz) == 3

    def test_same_code_other_provider_is_separate(self, provider, other_provider, matriz,
                                                  product, foreign_product):
        inventory.receive_batch(provider, matriz, 'L-01', [IntakeLine(product.pk, 1, Decimal('100'))])
        receipt = inventory.receive_batch(other_provider, matriz, 'L-01', [
            IntakeLine(foreign_product.pk, 1, Decimal('100')),
        ])

        assert receipt.merged is False
        assert SupplyBatch.objects.count() == 2

    def test_failure_rolls_back_everything(self, provider, matriz, product):
        inventory.receive_batch(provider, matriz, 'L-01', [IntakeLine(product.pk, 5, Decimal('100'))])

        with pytest.raises(ValidationError):
            inventory.receive_batch(provider, matriz, 'L-01', [
                IntakeLine(product.pk, 5, Decimal('100')),
                IntakeLine(999999, 5, Decimal('100')),
            ])

        batch = SupplyBatch.objects.get()
        assert batch.total_cost == Decimal('500.00')
        assert batch.lines.count() == 1
        assert inventory.get(product, matriz) == 5


class TestReceiveBatchValidation:

    def _receive(self, provider, branch, code='L-01', lines=None):
        return inventory.receive_batch(provider, branch, code, lines)

    def test_missing_branch(self, provider, product):
        with pytest.raises(ValidationError) as exc:
            self._receive(provider, None, lines=[IntakeLine(product.pk, 1, Decimal('1'))])
        assert exc.value.code == 'MISSING_BRANCH'

    def test_missing_provider(self, matriz, product):
        with pytest.raises(ValidationError) as exc:
            self._receive(None, matriz, lines=[IntakeLine(product.pk, 1, Decimal('1'))])
        assert exc.value.code == 'MISSING_PROVIDER'

    def test_blank_code(self, provider, matriz, product):
        with pytest.raises(ValidationError) as exc:
            self._receive(provider, matriz, code='   ', lines=[IntakeLine(product.pk, 1, Decimal('1'))])
        assert exc.value.code == 'MISSING_BATCH_CODE'

    def test_empty_lines(self, provider, matriz):
        with pytest.raises(ValidationError) as exc:
            self._receive(provider, matriz, lines=[])
        assert exc.value.code == 'EMPTY_LINES'

    @pytest.mark.parametrize('quantity', [0, -1, 2.5])
    def test_bad_quantity(self, provider, matriz, product, quantity):
        with pytest.raises(ValidationError) as exc:
            self._receive(provider, matriz, lines=[IntakeLine(product.pk, quantity, Decimal('1'))])
        assert exc.value.code == 'INVALID_QUANTITY'

    @pytest.mark.parametrize('cost', [Decimal('-1'), 'abc', None])
    def test_bad_cost(self, provider, matriz, product, cost):
        with pytest.raises(ValidationError) as exc:
            self._receive(provider, matriz, lines=[IntakeLine(product.pk, 1, cost)])
        assert exc.value.code == 'INVALID_COST'

    def test_unknown_product(self, provider, matriz):
        with pytest.raises(ValidationError) as exc:
            self._receive(provider, matriz, lines=[IntakeLine(999999, 1, Decimal('1'))])
        assert exc.value.code == 'PRODUCT_NOT_FOUND'

    def test_product_of_other_provider(self, provider, matriz, foreign_product):
        with pytest.raises(ValidationError) as exc:
            self._receive(provider, matriz, lines=[IntakeLine(foreign_product.pk, 1, Decimal('1'))])
        assert exc.value.code == 'PRODUCT_PROVIDER_MISMATCH'

    @override_settings(BRANCHSTOCK={'ENFORCE_PROVIDER_PRODUCTS': False})
    def test_product_of_other_provider_allowed_by_setting(self, provider, matriz, foreign_product):
        receipt = self._receive(provider, matriz, lines=[IntakeLine(foreign_product.pk, 1, Decimal('1'))])
        assert receipt.batch.provider == provider

    @pytest.mark.parametrize('cost', [Decimal('250'), Decimal('300')])
    def test_cost_not_below_price(self, provider, matriz, product, cost):
        with pytest.raises(ValidationError) as exc:
            self._receive(provider, matriz, lines=[IntakeLine(product.pk, 1, cost)])
        assert exc.value.code == 'COST_NOT_BELOW_PRICE'
        assert not SupplyBatch.objects.exists()



    def test_cost_with_more_than_two_places(self, provider, matriz, product):
        with pytest.raises(ValidationError) as exc:
            self._receive(provider, matriz, lines=[IntakeLine(product.pk, 1, Decimal('249.995'))])
        assert exc.value.code == 'INVALID_COST'
        assert not SupplyBatch.objects.exists()
        assert inventory.get(product, matriz) == 0

    def test_cost_is_stored_with_two_places(self, provider, matriz, product):
        receipt = self._receive(provider, matriz, lines=[IntakeLine(product.pk, 3, '249.990')])

        line = receipt.lines[0]
        assert line.unit_cost == Decimal('249.99')
        assert line.unit_cost < product.sale_price
        assert receipt.batch.total_cost == Decimal('749.97')

    def test_unknown_provider(self, matriz, product):
        with pytest.raises(ValidationError) as exc:
            self._receive(999999, matriz, lines=[IntakeLine(product.pk, 1, Decimal('1'))])
        assert exc.value.code == 'PROVIDER_NOT_FOUND'

    def test_unknown_branch(self, provider, product):
        with pytest.raises(ValidationError) as exc:
            self._receive(provider, 999999, lines=[IntakeLine(product.pk, 1, Decimal('1'))])
        assert exc.value.code == 'BRANCH_NOT_FOUND'
        assert not SupplyBatch.objects.exists()


class TestSupplyHistory:

    def test_newest_first_with_limit(self, provider, matriz, product):
        for code in ['L-01', 'L-02', 'L-03']:
            inventory.receive_batch(provider, matriz, code, [IntakeLine(product.pk, 1, Decimal('1'))])

        history = inventory.supply_history(limit=2)
        assert [batch.batch_code for batch in history] == ['L-03', 'L-02']

    @override_settings(BRANCHSTOCK={'HISTORY_LIMIT': 1})
    def test_default_limit_from_settings(self, provider, matriz, product):
        for code in ['L-01', 'L-02']:
            inventory.receive_batch(provider, matriz, code, [IntakeLine(product.pk, 1, Decimal('1'))])

        assert len(inventory.supply_history()) == 1

    def test_batch_receipt(self, provider, matriz, product):
        created = inventory.receive_batch(provider, matriz, 'L-01', [IntakeLine(product.pk, 3, Decimal('10'))])

        receipt = inventory.batch_receipt(created.batch)
        assert receipt.batch == created.batch
        assert [line.quantity_received for line in receipt.lines] == [3]
        assert receipt.lines[0].line_cost == Decimal('30.00')

    def test_default_batch_code(self, provider):
        assert inventory.default_batch_code(provider, date(2025, 3, 1)) == '20250301-BOUTIQUE BELLA'


class TestReceiveBatchByPrimaryKey:

    def test_provider_and_branch_ids(self, provider, matriz, product):
        receipt = inventory.receive_batch(provider.pk, matriz.pk, 'L-01', [
            IntakeLine(product.pk, 2, Decimal('100')),
        ])
        again = inventory.receive_batch(provider.pk, matriz.pk, 'L-01', [
            IntakeLine(product.pk, 1, Decimal('100')),
        ])

        assert receipt.batch.provider == provider
        assert receipt.batch.branch == matriz
        assert again.merged is True
        assert again.batch.total_cost == Decimal('300.00')
        assert inventory.get(product, matriz) == 3
