"""
Supply models: provider intake batches (lots) and their lines.

Usage:
    receipt = inventory.receive_batch(
        provider, branch, "20250301-ACME",
        [IntakeLine(product_id=p.pk, quantity=10, unit_cost=Decimal("120"))],
    )
    receipt.batch.total_cost
"""

from decimal import Decimal

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class SupplyBatchQuerySet(models.QuerySet):
    """Custom QuerySet for SupplyBatch with convenience filters."""

    def for_provider(self, provider):
        return self.filter(provider=provider)

    def at_branch(self, branch):
        return self.filter(branch=branch)

    def newest_first(self):
        return self.order_by('-received_at', '-pk')


class SupplyBatch(models.Model):
    """
    Provider intake grouped under a provider-scoped batch code.

    A second intake with the same (provider, batch_code) merges into the
    existing row: lines are appended and total_cost grows. It never creates
    a duplicate batch.
    """

    provider = models.ForeignKey(
        'branchstock.Provider',
        on_delete=models.PROTECT,
        related_name='supply_batches',
        verbose_name=_('Empresario'),
    )
    branch = models.ForeignKey(
        'branchstock.Branch',
        on_delete=models.PROTECT,
        related_name='supply_batches',
        verbose_name=_('Sucursal'),
    )
    batch_code = models.CharField(
        max_length=100,
        verbose_name=_('Código de Lote'),
        help_text=_('Único por empresario. Repetirlo fusiona la entrada.'),
    )
    total_cost = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Costo total'),
    )
    received_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Fecha de entrada'))
    updated_at = models.DateTimeField(auto_now=True)

    objects = SupplyBatchQuerySet.as_manager()

    class Meta:
        verbose_name = _('Lote de Abastecimiento')
        verbose_name_plural = _('Lotes de Abastecimiento')
        ordering = ['-received_at']
        constraints = [
            models.UniqueConstraint(
                fields=['provider', 'batch_code'],
                name='unique_supply_batch_code',
            ),
        ]

    @property
    def total_units(self) -> int:
        return self.lines.aggregate(t=models.Sum('quantity_received'))['t'] or 0

    def __str__(self) -> str:
        return f"Lote {self.batch_code}"


class SupplyLineItem(models.Model):
    """One product line of a batch. Append-only."""

    batch = models.ForeignKey(
        SupplyBatch,
        on_delete=models.PROTECT,
        related_name='lines',
        verbose_name=_('Lote'),
    )
    product = models.ForeignKey(
        'branchstock.Product',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Producto'),
    )
    quantity_received = models.PositiveIntegerField(verbose_name=_('Cantidad'))
    unit_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name=_('Costo unitario'),
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _('Renglón de Lote')
        verbose_name_plural = _('Renglones de Lote')
        ordering = ['created_at', 'pk']

    @property
    def line_cost(self) -> Decimal:
        return self.unit_cost * self.quantity_received

    def __str__(self) -> str:
        return f"{self.quantity_received}x {self.product} @ {self.unit_cost}"
