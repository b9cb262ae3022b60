"""
Branchstock Models.

Core models for multi-branch inventory:
- Branch: Where stock exists
- Provider / Product: Catalog inputs to code generation
- InventoryRecord: Quantity cache per (product, branch)
- Movement: Immutable ledger of changes
- SupplyBatch / SupplyLineItem: Provider intake lots
- Transfer / TransferLineItem: Stock moving between branches
- Sale / SaleLine: Point-of-sale decrements
"""

from branchstock.models.branch import Branch
from branchstock.models.catalog import Product, Provider
from branchstock.models.enums import MovementKind, PaymentMethod, TransferState
from branchstock.models.inventory import InventoryRecord
from branchstock.models.movement import Movement
from branchstock.models.sale import Sale, SaleLine
from branchstock.models.supply import SupplyBatch, SupplyLineItem
from branchstock.models.transfer import Transfer, TransferLineItem

__all__ = [
    'TransferState',
    'MovementKind',
    'PaymentMethod',
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
]
