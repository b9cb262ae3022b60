"""
Enums for Branchstock models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class TransferState(models.TextChoices):
    """
    Transfer lifecycle.

    IN_TRANSIT: Sent. Deducted from origin, not yet credited anywhere.
    COMPLETED:  Received. Credited to destination. Terminal.
    REJECTED:   Refused by destination. Credited back to origin. Terminal.
    """
    IN_TRANSIT = 'in_transit', _('En tránsito')
    COMPLETED = 'completed', _('Completado')
    REJECTED = 'rejected', _('Rechazado')

    @classmethod
    def terminal(cls) -> list[str]:
        return [cls.COMPLETED, cls.REJECTED]


class MovementKind(models.TextChoices):
    """Why a ledger delta happened."""
    SUPPLY = 'supply', _('Entrada')                      # Provider intake (+)
    SALE = 'sale', _('Venta')                            # Sale (-)
    TRANSFER_OUT = 'transfer_out', _('Traspaso enviado')  # Origin on send (-)
    TRANSFER_IN = 'transfer_in', _('Traspaso recibido')   # Destination on receive (+)
    TRANSFER_RETURN = 'transfer_return', _('Traspaso devuelto')  # Origin on reject (+)
    ADJUSTMENT = 'adjustment', _('Ajuste')               # Manual correction (+/-)


class PaymentMethod(models.TextChoices):
    CASH = 'cash', _('Efectivo')
    CARD = 'card', _('Tarjeta')
    TRANSFER = 'transfer', _('Transferencia')
