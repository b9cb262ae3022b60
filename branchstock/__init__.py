"""
Django Branchstock — Inventario multi-sucursal.

Uso:
    from branchstock import inventory, InventoryError

    inventory.receive_batch(acme, centro, "20250301-ACME", lines)
    inventory.send_transfer(centro, norte, lines)
    inventory.get(producto, norte)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'inventory':
        from branchstock.service import Inventory
        return Inventory
    elif name in ('InventoryError', 'ValidationError', 'InsufficientStock',
                  'DuplicateIdentifier', 'InvalidStateTransition'):
        from branchstock import exceptions
        return getattr(exceptions, name)
    elif name in ('Branch', 'Provider', 'Product', 'InventoryRecord', 'Movement',
                  'SupplyBatch', 'SupplyLineItem', 'Transfer', 'TransferLineItem',
                  'Sale', 'SaleLine', 'TransferState', 'MovementKind', 'PaymentMethod'):
        from branchstock import models
        return getattr(models, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'inventory',
    'InventoryError',
    'ValidationError',
    'InsufficientStock',
    'DuplicateIdentifier',
    'InvalidStateTransition',
    'Branch',
    'Provider',
    'Product',
    'InventoryRecord',
    'Movement',
    'SupplyBatch',
    'SupplyLineItem',
    'Transfer',
    'TransferLineItem',
    'Sale',
    'SaleLine',
    'TransferState',
    'MovementKind',
    'PaymentMethod',
]

__version__ = '0.1.0'
