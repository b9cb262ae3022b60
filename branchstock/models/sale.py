"""
Sale models: header and lines of a point-of-sale ticket.

Only the parts the ledger contract needs: what was sold, where, for how much.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from branchstock.models.enums import PaymentMethod


class Sale(models.Model):
    branch = models.ForeignKey(
        'branchstock.Branch',
        on_delete=models.PROTECT,
        related_name='sales',
        verbose_name=_('Sucursal'),
    )
    total = models.DecimalField(max_digits=14, decimal_places=2, verbose_name=_('Total'))
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
        verbose_name=_('Método de pago'),
    )
    sold_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Fecha de venta'))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Vendedor'),
    )

    class Meta:
        verbose_name = _('Venta')
        verbose_name_plural = _('Ventas')
        ordering = ['-sold_at', '-pk']

    def __str__(self) -> str:
        return f"Venta #{self.pk} ({self.total})"


class SaleLine(models.Model):
    sale = models.ForeignKey(
        Sale,
        on_delete=models.PROTECT,
        related_name='lines',
        verbose_name=_('Venta'),
    )
    product = models.ForeignKey(
        'branchstock.Product',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Producto'),
    )
    quantity = models.PositiveIntegerField(verbose_name=_('Cantidad'))
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, verbose_name=_('Precio unitario'))
    line_total = models.DecimalField(max_digits=14, decimal_places=2, verbose_name=_('Subtotal'))

    class Meta:
        verbose_name = _('Renglón de Venta')
        verbose_name_plural = _('Renglones de Venta')
        ordering = ['pk']

    def __str__(self) -> str:
        return f"{self.quantity}x {self.product}"
