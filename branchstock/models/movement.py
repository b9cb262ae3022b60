"""
Movement model — Immutable ledger of quantity changes.
"""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models, transaction
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from branchstock.models.enums import MovementKind


class Movement(models.Model):
    """
    Immutable record of a quantity change.

    Rules:
    - NEVER update() or delete()
    - Corrections are new Movements with inverse delta
    - Updates InventoryRecord.quantity atomically on save()

    This is the ONLY model that changes quantity. Go through
    InventoryLedger.adjust(), which locks the record and checks the
    result is non-negative before creating the Movement.
    """

    record = models.ForeignKey(
        'branchstock.InventoryRecord',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Existencia'),
    )

    delta = models.IntegerField(
        verbose_name=_('Variación'),
        help_text=_('Positivo = entrada, Negativo = salida'),
    )
    kind = models.CharField(
        max_length=20,
        choices=MovementKind.choices,
        verbose_name=_('Tipo'),
    )

    # External reference (supply batch, transfer, sale)
    reference_type = models.ForeignKey(
        ContentType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Tipo de Referencia'),
    )
    reference_id = models.PositiveBigIntegerField(null=True, blank=True, verbose_name=_('ID de Referencia'))
    reference = GenericForeignKey('reference_type', 'reference_id')

    reason = models.CharField(
        max_length=255,
        verbose_name=_('Motivo'),
        help_text=_('Obligatorio. Ej: "Lote 20250301-ACME", "Traspaso #12"'),
    )
    metadata = models.JSONField(default=dict, blank=True, verbose_name=_('Metadatos'))

    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Fecha/Hora'))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        verbose_name=_('Usuario'),
    )

    class Meta:
        verbose_name = _('Movimiento')
        verbose_name_plural = _('Movimientos')
        ordering = ['timestamp', 'pk']
        indexes = [
            models.Index(fields=['record', 'timestamp'], name='branchstock_mov_record_ts'),
            models.Index(fields=['reference_type', 'reference_id'], name='branchstock_mov_reference'),
        ]

    def save(self, *args, **kwargs):
        """Save movement and update the record cache atomically."""
        if self.pk:
            raise ValueError(
                "Los movimientos son inmutables. "
                "Para corregir, cree un nuevo movimiento con delta inverso."
            )

        if not self.reason:
            raise ValueError("El motivo es obligatorio")

        with transaction.atomic():
            super().save(*args, **kwargs)

            from branchstock.models.inventory import InventoryRecord

            InventoryRecord.objects.filter(pk=self.record_id).update(
                quantity=F('quantity') + self.delta,
                updated_at=timezone.now()
            )

    def delete(self, *args, **kwargs):
        """Movements are immutable."""
        raise ValueError(
            "Los movimientos son inmutables. "
            "Para revertir, cree un nuevo movimiento con delta inverso."
        )

    def __str__(self) -> str:
        signal = '+' if self.delta > 0 else ''
        return f"{signal}{self.delta} | {self.reason}"
