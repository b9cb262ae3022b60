"""
Tests for management commands.
"""

from io import StringIO

import pytest
from django.core.management import call_command

from branchstock.models import InventoryRecord


pytestmark = pytest.mark.django_db


class TestRecalculateInventory:

    def _drift(self, stocked):
        record = InventoryRecord.objects.get(product=stocked['product'], branch=stocked['branch'])
        InventoryRecord.objects.filter(pk=record.pk).update(quantity=2)
        return record

    def test_repairs_drifted_records(self, stocked):
        record = self._drift(stocked)
        out = StringIO()

        call_command('recalculate_inventory', stdout=out)

        record.refresh_from_db()
        assert record.quantity == 10
        assert '1 existencia(s) corregida(s)' in out.getvalue()

    def test_dry_run_changes_nothing(self, stocked):
        record = self._drift(stocked)
        out = StringIO()

        call_command('recalculate_inventory', '--dry-run', stdout=out)

        record.refresh_from_db()
        assert record.quantity == 2
        assert '2 → 10' in out.getvalue()
        assert '1 existencia(s) se corregiría(n)' in out.getvalue()

    def test_clean_ledger(self, stocked):
        out = StringIO()
        call_command('recalculate_inventory', stdout=out)
        assert '0 existencia(s) corregida(s)' in out.getvalue()
