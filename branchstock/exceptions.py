"""
Exceptions for Branchstock.

Every error is an InventoryError with a structured code for programmatic
handling. Subclasses split the taxonomy callers actually branch on:

    ValidationError         malformed input, rejected before any write
    InsufficientStock       a ledger decrement would go negative
    DuplicateIdentifier     generated SKU/barcode/visual code already taken (retryable)
    InvalidStateTransition  transfer is not in the state the operation needs
"""

from decimal import Decimal
from typing import Any


class InventoryError(Exception):
    """
    Structured exception for inventory operations.

    Usage:
        try:
            inventory.send_transfer(centro, norte, lines)
        except InsufficientStock as e:
            print(f"Solo hay {e.available} disponibles")
        except InventoryError as e:
            return JsonResponse(e.as_dict(), status=400)

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
        retryable: Whether the caller may regenerate input and retry
    """

    default_code = 'INVENTORY_ERROR'
    retryable = False

    _default_messages = {
        'INVENTORY_ERROR': 'Error de inventario',
        'INVALID_INPUT': 'Datos inválidos',
        # validation
        'INVALID_QUANTITY': 'Cantidad inválida (debe ser un entero positivo)',
        'EMPTY_LINES': 'Se requiere al menos un renglón',
        'MISSING_BRANCH': 'No se ha seleccionado la sucursal',
        'SAME_BRANCH': 'La sucursal destino debe ser distinta a la de origen',
        'MISSING_BATCH_CODE': 'El código de lote es obligatorio',
        'MISSING_PROVIDER': 'No se ha seleccionado el empresario',
        'INVALID_COST': 'Costo inválido',
        'COST_NOT_BELOW_PRICE': 'El precio de venta debe ser mayor al costo',
        'PRODUCT_NOT_FOUND': 'Producto no encontrado',
        'PROVIDER_NOT_FOUND': 'Empresario no encontrado',
        'PRODUCT_PROVIDER_MISMATCH': 'El producto no pertenece al empresario',
        'BRANCH_NOT_FOUND': 'Sucursal no encontrada o inactiva',
        'NO_PRIMARY_BRANCH': 'No hay una sucursal matriz configurada',
        'TRANSFER_NOT_FOUND': 'Traspaso no encontrado',
        'WRONG_BRANCH': 'Solo la sucursal destino puede recibir el traspaso',
        'INVALID_LETTER': 'La letra del prefijo debe ser A-Z',
        'INVALID_EAN_BASE': 'La base EAN-13 debe tener 12 dígitos',
        'INVALID_GLOBAL_ID': 'El ID global EAN debe estar entre 0 y 999',
        'MISSING_CODE_CONFIG': 'El empresario no tiene Código Visual o ID Global',
        'REASON_REQUIRED': 'El motivo es obligatorio',
        # stock
        'INSUFFICIENT_STOCK': 'No hay suficiente stock',
        # identifiers
        'DUPLICATE_SKU': 'El SKU generado ya existe',
        'DUPLICATE_BARCODE': 'El código de barras generado ya existe',
        'DUPLICATE_VISUAL_CODE': 'El código visual generado ya existe',
        # state
        'INVALID_STATE': 'Estado inválido para esta operación',
    }

    def __init__(self, code: str | None = None, message: str | None = None, **data: Any):
        self.code = code or self.default_code
        self.message = message or self._default_messages.get(self.code, self.code)
        self.data = data
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.data!r})"

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'retryable': self.retryable,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }


class ValidationError(InventoryError):
    """Malformed input. Raised before any mutation."""

    default_code = 'INVALID_INPUT'


class InsufficientStock(InventoryError):
    """A ledger decrement would leave a negative quantity."""

    default_code = 'INSUFFICIENT_STOCK'

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)


class DuplicateIdentifier(InventoryError):
    """
    A generated identifier collided at persistence time.

    Retryable: regenerate from a fresh sequence read and try again.
    """

    default_code = 'DUPLICATE_SKU'
    retryable = True


class InvalidStateTransition(InventoryError):
    """Operation is not legal from the current state."""

    default_code = 'INVALID_STATE'

    @property
    def current(self) -> str | None:
        return self.data.get('current')

    @property
    def expected(self) -> str | None:
        return self.data.get('expected')
