"""
Transfer models: stock moving between two branches.
"""

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from branchstock.models.enums import TransferState


class TransferQuerySet(models.QuerySet):

    def incoming(self, branch):
        return self.filter(destination_branch=branch)

    def involving(self, branch):
        return self.filter(Q(origin_branch=branch) | Q(destination_branch=branch))

    def terminal(self):
        return self.filter(state__in=TransferState.terminal())


class Transfer(models.Model):
    """
    Unidirectional stock movement between branches.

    LIFECYCLE:

        ┌────────────┐   receive()   ┌───────────┐
        │ IN_TRANSIT │ ────────────► │ COMPLETED │
        └────────────┘               └───────────┘
              │
              │ reject()             ┌───────────┐
              └────────────────────► │ REJECTED  │
                                     └───────────┘

    Origin is debited at send time. While IN_TRANSIT the units are visible
    at neither branch. Receive credits the destination, reject credits the
    origin, both with the quantities persisted on the lines.
    """

    origin_branch = models.ForeignKey(
        'branchstock.Branch',
        on_delete=models.PROTECT,
        related_name='outgoing_transfers',
        verbose_name=_('Origen'),
    )
    destination_branch = models.ForeignKey(
        'branchstock.Branch',
        on_delete=models.PROTECT,
        related_name='incoming_transfers',
        verbose_name=_('Destino'),
    )
    state = models.CharField(
        max_length=20,
        choices=TransferState.choices,
        default=TransferState.IN_TRANSIT,
        db_index=True,
        verbose_name=_('Estado'),
    )

    sent_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Enviado'))
    received_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Recibido'))
    rejected_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Rechazado'))
    rejection_reason = models.CharField(
        max_length=255,
        blank=True,
        default='',
        verbose_name=_('Motivo de rechazo'),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Enviado por'),
    )

    objects = TransferQuerySet.as_manager()

    class Meta:
        verbose_name = _('Traspaso')
        verbose_name_plural = _('Traspasos')
        ordering = ['-sent_at', '-pk']
        constraints = [
            models.CheckConstraint(
                condition=~Q(origin_branch=F('destination_branch')),
                name='transfer_distinct_branches',
            ),
        ]

    @property
    def is_in_transit(self) -> bool:
        return self.state == TransferState.IN_TRANSIT

    @property
    def is_terminal(self) -> bool:
        return self.state in TransferState.terminal()

    def __str__(self) -> str:
        return f"Traspaso #{self.pk}: {self.origin_branch} → {self.destination_branch} ({self.get_state_display()})"


class TransferLineItem(models.Model):
    """Quantity of one product sent. Immutable once created."""

    transfer = models.ForeignKey(
        Transfer,
        on_delete=models.PROTECT,
        related_name='lines',
        verbose_name=_('Traspaso'),
    )
    product = models.ForeignKey(
        'branchstock.Product',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Producto'),
    )
    quantity_sent = models.PositiveIntegerField(verbose_name=_('Cantidad enviada'))

    class Meta:
        verbose_name = _('Renglón de Traspaso')
        verbose_name_plural = _('Renglones de Traspaso')
        ordering = ['pk']
        constraints = [
            models.UniqueConstraint(
                fields=['transfer', 'product'],
                name='unique_transfer_product',
            ),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError("Los renglones de traspaso son inmutables.")
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.quantity_sent}x {self.product}"
