"""
Tests for the inventory ledger (get / adjust) and Movement immutability.
"""

import threading

import pytest
from django.db import connection

from branchstock import inventory
from branchstock.exceptions import InsufficientStock, ValidationError
from branchstock.models import InventoryRecord, Movement, MovementKind


pytestmark = pytest.mark.django_db


class TestLedgerGet:

    def test_missing_record_is_zero(self, product, matriz):
        assert inventory.get(product, matriz) == 0
        assert not InventoryRecord.objects.exists()

    def test_accepts_primary_keys(self, stocked, matriz):
        assert inventory.get(stocked['product'].pk, matriz.pk) == 10


class TestLedgerAdjust:

    def test_increment_creates_record(self, product, matriz):
        assert inventory.adjust(product, matriz, 7, kind=MovementKind.SUPPLY, reason='Entrada') == 7

        record = InventoryRecord.objects.get(product=product, branch=matriz)
        assert record.quantity == 7
        assert record.movements.count() == 1

    def test_decrement(self, stocked, matriz):
        product = stocked['product']
        assert inventory.adjust(product, matriz, -3, kind=MovementKind.SALE, reason='Venta') == 7
        assert inventory.get(product, matriz) == 7

    def test_decrement_to_zero(self, stocked, matriz):
        assert inventory.adjust(stocked['product'], matriz, -10, reason='Merma') == 0

    def test_decrement_below_zero_fails_and_leaves_quantity(self, stocked, matriz):
        product = stocked['product']

        with pytest.raises(InsufficientStock) as exc:
            inventory.adjust(product, matriz, -11, kind=MovementKind.SALE, reason='Venta')

        assert exc.value.available == 10
        assert exc.value.requested == 11
        assert inventory.get(product, matriz) == 10
        assert Movement.objects.filter(record__product=product).count() == 1

    def test_decrement_missing_record_does_not_create_it(self, product, norte):
        with pytest.raises(InsufficientStock) as exc:
            inventory.adjust(product, norte, -1, reason='Venta')

        assert exc.value.available == 0
        assert not InventoryRecord.objects.filter(product=product, branch=norte).exists()

    @pytest.mark.parametrize('delta', [0, 1.5, True, '3'])
    def test_invalid_delta(self, product, matriz, delta):
        with pytest.raises(ValidationError) as exc:
            inventory.adjust(product, matriz, delta, reason='Ajuste')
        assert exc.value.code == 'INVALID_QUANTITY'

    def test_movement_records_kind_reference_and_user(self, stocked, norte, matriz, user):
        product = stocked['product']
        inventory.adjust(product, matriz, -2, kind=MovementKind.ADJUSTMENT,
                         reason='Conteo físico', reference=norte, user=user, note='faltante')

        movement = Movement.objects.filter(record__branch=matriz, delta=-2).get()
        assert movement.kind == MovementKind.ADJUSTMENT
        assert movement.reference == norte
        assert movement.user == user
        assert movement.metadata == {'note': 'faltante'}

    def test_default_reason_is_kind_label(self, product, matriz):
        inventory.adjust(product, matriz, 1, kind=MovementKind.SUPPLY)
        assert Movement.objects.get().reason == 'Entrada'

    def test_branches_are_independent(self, stocked, matriz, norte):
        inventory.adjust(stocked['product'], norte, 2, reason='Entrada')

        assert inventory.get(stocked['product'], matriz) == 10
        assert inventory.get(stocked['product'], norte) == 2


class TestMovementImmutability:

    def test_cannot_update(self, stocked):
        movement = Movement.objects.first()
        movement.reason = 'Otro'
        with pytest.raises(ValueError):
            movement.save()

    def test_cannot_delete(self, stocked):
        with pytest.raises(ValueError):
            Movement.objects.first().delete()

    def test_reason_required(self, stocked):
        record = InventoryRecord.objects.first()
        with pytest.raises(ValueError):
            Movement.objects.create(record=record, delta=1, kind=MovementKind.ADJUSTMENT, reason='')


class TestRecalculate:

    def test_recalculate_repairs_drift(self, stocked, matriz):
        record = InventoryRecord.objects.get(product=stocked['product'], branch=matriz)
        InventoryRecord.objects.filter(pk=record.pk).update(quantity=3)
        record.refresh_from_db()

        assert record.recalculate() == 10
        record.refresh_from_db()
        assert record.quantity == 10

    def test_recalculate_without_commit(self, stocked, matriz):
        record = InventoryRecord.objects.get(product=stocked['product'], branch=matriz)
        InventoryRecord.objects.filter(pk=record.pk).update(quantity=3)
        record.refresh_from_db()

        assert record.recalculate(commit=False) == 10
        record.refresh_from_db()
        assert record.quantity == 3


@pytest.mark.django_db(transaction=True)
@pytest.mark.skipif(
    not connection.features.has_select_for_update,
    reason='needs row locks (PostgreSQL/MySQL)',
)
class TestConcurrentAdjust:
    """Same-key decrements from parallel connections serialize on the row lock."""

    def test_parallel_decrements_never_oversell(self, product, matriz):
        inventory.adjust(product, matriz, 10, reason='Inventario inicial')
        outcomes = []

        def sell():
            try:
                inventory.adjust(product.pk, matriz.pk, -3, kind=MovementKind.SALE, reason='Venta')
                outcomes.append('ok')
            except InsufficientStock:
                outcomes.append('short')
            finally:
                connection.close()

        threads = [threading.Thread(target=sell) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(outcomes) == ['ok', 'ok', 'ok', 'short', 'short']
        assert inventory.get(product, matriz) == 1
        record = InventoryRecord.objects.get(product=product, branch=matriz)
        assert record.recalculate(commit=False) == 1
