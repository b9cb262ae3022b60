"""
Inventory ledger — the only write path for per-branch quantities.

All methods use transaction.atomic() with row locking.
"""

import logging

from django.db import transaction

from branchstock.exceptions import InsufficientStock, ValidationError
from branchstock.models.enums import MovementKind
from branchstock.models.inventory import InventoryRecord
from branchstock.models.movement import Movement

logger = logging.getLogger('branchstock')


def pk_of(obj):
    """Accept model instances or raw primary keys."""
    return getattr(obj, 'pk', obj)


class InventoryLedger:
    """Per (product, branch) quantity reads and adjustments."""

    @classmethod
    def get(cls, product, branch) -> int:
        """Quantity of product at branch. 0 when no record exists."""
        quantity = (
            InventoryRecord.objects
            .filter(product_id=pk_of(product), branch_id=pk_of(branch))
            .values_list('quantity', flat=True)
            .first()
        )
        return quantity or 0

    @classmethod
    def adjust(cls, product, branch, delta: int, *, kind: str = MovementKind.ADJUSTMENT,
               reason: str = '', reference=None, user=None, **metadata) -> int:
        """
        Apply a signed delta and return the new quantity.

        Raises:
            ValidationError('INVALID_QUANTITY'): delta is zero or not an integer
            InsufficientStock: result would be negative (quantity unchanged)

        Concurrency:
            - Runs under transaction.atomic()
            - Positive deltas get_or_create the record first
            - select_for_update() on the record, check on the locked value
            - Movement.save() applies delta with an F() increment
            - Multi-line callers must call in ascending product-id order
        """
        if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
            raise ValidationError('INVALID_QUANTITY', delta=delta)

        product_id, branch_id = pk_of(product), pk_of(branch)
        reason = reason or MovementKind(kind).label

        with transaction.atomic():
            if delta > 0:
                InventoryRecord.objects.get_or_create(product_id=product_id, branch_id=branch_id)

            record = (
                InventoryRecord.objects
                .select_for_update()
                .filter(product_id=product_id, branch_id=branch_id)
                .first()
            )
            available = record.quantity if record else 0

            if available + delta < 0:
                raise InsufficientStock(
                    product_id=product_id,
                    branch_id=branch_id,
                    available=available,
                    requested=-delta,
                )

            Movement.objects.create(
                record=record,
                delta=delta,
                kind=kind,
                reason=str(reason),
                reference=reference,
                user=user,
                metadata=metadata,
            )
            new_quantity = available + delta

            logger.info(
                "inventory.adjust",
                extra={
                    "product_id": product_id,
                    "branch_id": branch_id,
                    "delta": delta,
                    "kind": str(kind),
                    "quantity": new_quantity,
                },
            )
            return new_quantity
