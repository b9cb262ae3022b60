"""
Management command to rebuild inventory caches from the movement ledger.

Usage:
    python manage.py recalculate_inventory
    python manage.py recalculate_inventory --dry-run
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from branchstock.models import InventoryRecord


class Command(BaseCommand):
    """Recalculate InventoryRecord.quantity from Movements."""

    help = 'Recalcula las existencias a partir de los movimientos'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Muestra las diferencias sin corregirlas'
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        drifted = 0

        records = InventoryRecord.objects.select_related('product', 'branch').order_by('pk')
        for record in records.iterator():
            with transaction.atomic():
                locked = InventoryRecord.objects.select_for_update().get(pk=record.pk)
                cached = locked.quantity
                ledger = locked.recalculate(commit=not dry_run)

            if ledger != cached:
                drifted += 1
                self.stdout.write(
                    f'{record.product} [{record.branch}]: {cached} → {ledger}'
                )

        if dry_run:
            self.stdout.write(f'{drifted} existencia(s) se corregiría(n)')
        else:
            self.stdout.write(
                self.style.SUCCESS(f'{drifted} existencia(s) corregida(s)')
            )
