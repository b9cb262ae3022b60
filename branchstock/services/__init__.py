"""
Inventory services — modular organization of inventory operations.

    from branchstock.services import InventoryLedger, SupplyIntake, TransferWorkflow
"""

from branchstock.services.codes import CodeGenerator, GeneratedCodes
from branchstock.services.intake import BatchReceipt, IntakeLine, SupplyIntake
from branchstock.services.ledger import InventoryLedger
from branchstock.services.queries import InventoryQueries, InventoryView
from branchstock.services.sales import SaleLineRequest, SalesTransaction
from branchstock.services.sequences import ProviderSequenceStore
from branchstock.services.transfers import TransferLine, TransferWorkflow

__all__ = [
    'CodeGenerator',
    'GeneratedCodes',
    'ProviderSequenceStore',
    'InventoryLedger',
    'SupplyIntake',
    'IntakeLine',
    'BatchReceipt',
    'TransferWorkflow',
    'TransferLine',
    'SalesTransaction',
    'SaleLineRequest',
    'InventoryQueries',
    'InventoryView',
]
