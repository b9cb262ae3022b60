"""
Inventory Service — The single public interface for all inventory operations.

Usage:
    from branchstock import inventory, InventoryError
    from branchstock.services import IntakeLine, TransferLine

    inventory.receive_batch(acme, centro, "20250301-ACME",
                            [IntakeLine(product_id=p.pk, quantity=10, unit_cost=Decimal("80"))])
    transfer = inventory.send_transfer(centro, norte, [TransferLine(p.pk, 4)])
    inventory.receive_transfer(transfer, branch=norte)
    inventory.get(p, norte)  # 4

IMPORTANT: Every state-changing method runs in one transaction.atomic()
block and either applies completely or raises an InventoryError.
"""

from branchstock.services.codes import CodeGenerator
from branchstock.services.intake import SupplyIntake
from branchstock.services.ledger import InventoryLedger
from branchstock.services.queries import InventoryQueries
from branchstock.services.sales import SalesTransaction
from branchstock.services.transfers import TransferWorkflow


class Inventory(
    InventoryQueries,
    InventoryLedger,
    SupplyIntake,
    TransferWorkflow,
    SalesTransaction,
    CodeGenerator,
):
    """
    Single interface for all inventory operations.

    Branches are always explicit; resolve_branch() is the only place that
    falls back to the primary branch.
    """
