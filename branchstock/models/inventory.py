"""
InventoryRecord model — Quantity cache per (product, branch).
"""

import logging

from django.db import models
from django.db.models import Q, Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _

logger = logging.getLogger('branchstock')


class InventoryRecordQuerySet(models.QuerySet):
    """QuerySet with helper filters for ledger rows."""

    def for_product(self, product):
        return self.filter(product=product)

    def at_branch(self, branch):
        return self.filter(branch=branch)

    def in_stock(self):
        return self.filter(quantity__gt=0)


class InventoryRecord(models.Model):
    """
    Stock of one product at one branch.

    Rules:
    - One row per (product, branch) that ever held stock; no row means 0
    - quantity never goes negative (checked under lock, backed by a DB constraint)
    - quantity is a cache updated atomically by Movement.save()
    - Rows are never deleted

    Use recalculate() for audit/correction.
    """

    product = models.ForeignKey(
        'branchstock.Product',
        on_delete=models.PROTECT,
        related_name='inventory_records',
        verbose_name=_('Producto'),
    )
    branch = models.ForeignKey(
        'branchstock.Branch',
        on_delete=models.PROTECT,
        related_name='inventory_records',
        verbose_name=_('Sucursal'),
    )

    # Quantity cache (updated atomically by Movement)
    quantity = models.IntegerField(
        default=0,
        verbose_name=_('Cantidad'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = InventoryRecordQuerySet.as_manager()

    class Meta:
        verbose_name = _('Existencia')
        verbose_name_plural = _('Existencias')
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'branch'],
                name='unique_inventory_record',
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name='inventory_quantity_non_negative',
            ),
        ]

    def recalculate(self, commit: bool = True) -> int:
        """
        Recalculate quantity from Movements.

        Use for:
        - Integrity audit
        - Correction after detected inconsistency

        Args:
            commit: Save the corrected cache (False = only report)

        Returns:
            Quantity implied by the movement ledger
        """
        total = self.movements.aggregate(
            t=Coalesce(Sum('delta'), 0)
        )['t']

        if total != self.quantity:
            old = self.quantity
            logger.warning(
                "inventory.recalculate",
                extra={
                    "record_id": self.pk,
                    "cached": old,
                    "ledger": total,
                    "diff": total - old,
                    "commit": commit,
                },
            )
            if commit:
                self.quantity = total
                self.save(update_fields=['quantity', 'updated_at'])

        return total

    def __str__(self) -> str:
        return f"{self.product} [{self.branch}]: {self.quantity}"
