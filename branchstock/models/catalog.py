"""
Catalog models — Provider and Product.

Catalog CRUD lives outside the inventory core. These models carry only what
the core reads (prices, provider counters) and writes at creation time
(sku, barcode, visual code).
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


class Provider(models.Model):
    """
    Provider ("empresario") supplying consigned goods.

    Code counters:
    - letter_prefix + letter_sequence → visual_code ("B001")
    - last_sku_sequence → next SKU "B001-00005" and EAN-13 body
    - ean_global_id → 3-digit provider block inside the EAN-13

    Counters are advanced only by branchstock.services (sequences, codes).
    """

    name = models.CharField(
        max_length=200,
        verbose_name=_('Nombre'),
    )
    visual_code = models.CharField(
        max_length=10,
        blank=True,
        default='',
        verbose_name=_('Código Visual'),
        help_text=_('Letra + consecutivo, ej: B001'),
    )
    letter_prefix = models.CharField(
        max_length=1,
        blank=True,
        default='',
        verbose_name=_('Letra'),
    )
    letter_sequence = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Consecutivo de letra'),
    )
    ean_global_id = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        unique=True,
        verbose_name=_('ID Global EAN'),
        help_text=_('0-999. Bloque del empresario dentro del EAN-13.'),
    )
    last_sku_sequence = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Último consecutivo SKU'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Empresario')
        verbose_name_plural = _('Empresarios')
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['visual_code'],
                condition=~Q(visual_code=''),
                name='unique_provider_visual_code',
            ),
            models.UniqueConstraint(
                fields=['letter_prefix', 'letter_sequence'],
                condition=~Q(letter_prefix=''),
                name='unique_provider_letter_sequence',
            ),
        ]

    def __str__(self) -> str:
        if self.visual_code:
            return f"{self.visual_code} · {self.name}"
        return self.name


class Product(models.Model):
    """Sellable product. One provider, one SKU, optional EAN-13."""

    provider = models.ForeignKey(
        Provider,
        on_delete=models.PROTECT,
        related_name='products',
        verbose_name=_('Empresario'),
    )
    name = models.CharField(
        max_length=200,
        verbose_name=_('Nombre'),
    )
    sku = models.CharField(
        max_length=32,
        unique=True,
        verbose_name=_('SKU'),
    )
    barcode = models.CharField(
        max_length=13,
        blank=True,
        default='',
        verbose_name=_('Código de barras'),
    )
    sale_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name=_('Precio de venta'),
    )
    cost_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Costo'),
    )
    is_active = models.BooleanField(default=True, verbose_name=_('Activo'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Producto')
        verbose_name_plural = _('Productos')
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['barcode'],
                condition=~Q(barcode=''),
                name='unique_product_barcode',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.sku})"
