"""
Transfer workflow — two-phase stock movement between branches.

    send:    origin −qty   (IN_TRANSIT, units visible nowhere)
    receive: destination +quantity_sent   (COMPLETED)
    reject:  origin +quantity_sent        (REJECTED)

Credits always use the persisted quantity_sent, never a live re-read.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from branchstock.exceptions import InvalidStateTransition, ValidationError
from branchstock.models.catalog import Product
from branchstock.models.enums import MovementKind, TransferState
from branchstock.models.transfer import Transfer, TransferLineItem
from branchstock.services.ledger import InventoryLedger, pk_of
from branchstock.services.queries import InventoryQueries

logger = logging.getLogger('branchstock')


@dataclass(frozen=True)
class TransferLine:
    product_id: int
    quantity: int


class TransferWorkflow:
    """Send, receive, reject and list transfers."""

    @classmethod
    def send_transfer(cls, origin, destination, lines: list[TransferLine], *, user=None) -> Transfer:
        """
        Debit origin and open an IN_TRANSIT transfer.

        Duplicate product lines are summed. Lines are debited in ascending
        product-id order.

        Raises:
            ValidationError: missing/same/unknown branch, empty lines, bad quantity, unknown product
            InsufficientStock: any line short at origin (nothing applied)
        """
        if origin is None or destination is None:
            raise ValidationError('MISSING_BRANCH')
        if pk_of(origin) == pk_of(destination):
            raise ValidationError('SAME_BRANCH', branch_id=pk_of(origin))
        if not lines:
            raise ValidationError('EMPTY_LINES')

        quantities = defaultdict(int)
        for line in lines:
            if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity <= 0:
                raise ValidationError('INVALID_QUANTITY', product_id=line.product_id, quantity=line.quantity)
            quantities[line.product_id] += line.quantity

        origin = InventoryQueries.resolve_branch(origin)
        destination = InventoryQueries.resolve_branch(destination)
        missing = sorted(set(quantities) - set(Product.objects.in_bulk(list(quantities))))
        if missing:
            raise ValidationError('PRODUCT_NOT_FOUND', product_id=missing[0])

        with transaction.atomic():
            transfer = Transfer.objects.create(
                origin_branch=origin,
                destination_branch=destination,
                state=TransferState.IN_TRANSIT,
                user=user,
            )
            for product_id in sorted(quantities):
                quantity = quantities[product_id]
                InventoryLedger.adjust(
                    product_id,
                    transfer.origin_branch_id,
                    -quantity,
                    kind=MovementKind.TRANSFER_OUT,
                    reason=f"Traspaso #{transfer.pk}",
                    reference=transfer,
                    user=user,
                )
                TransferLineItem.objects.create(
                    transfer=transfer,
                    product_id=product_id,
                    quantity_sent=quantity,
                )

            logger.info(
                "transfer.send",
                extra={
                    "transfer_id": transfer.pk,
                    "origin_id": transfer.origin_branch_id,
                    "destination_id": transfer.destination_branch_id,
                    "lines": len(quantities),
                    "units": sum(quantities.values()),
                },
            )
            return transfer

    @classmethod
    def receive_transfer(cls, transfer, *, branch=None, user=None) -> Transfer:
        """
        Credit destination with every quantity_sent and complete the transfer.

        Raises:
            ValidationError('TRANSFER_NOT_FOUND')
            ValidationError('WRONG_BRANCH'): branch given and not the destination
            InvalidStateTransition: not IN_TRANSIT (e.g. already received)
        """
        with transaction.atomic():
            locked = cls._lock(transfer)

            if branch is not None and pk_of(branch) != locked.destination_branch_id:
                raise ValidationError(
                    'WRONG_BRANCH',
                    transfer_id=locked.pk,
                    branch_id=pk_of(branch),
                    destination_id=locked.destination_branch_id,
                )
            cls._require_in_transit(locked)

            for line in locked.lines.order_by('product_id'):
                InventoryLedger.adjust(
                    line.product_id,
                    locked.destination_branch_id,
                    line.quantity_sent,
                    kind=MovementKind.TRANSFER_IN,
                    reason=f"Traspaso #{locked.pk}",
                    reference=locked,
                    user=user,
                )

            locked.state = TransferState.COMPLETED
            locked.received_at = timezone.now()
            locked.save(update_fields=['state', 'received_at'])

            logger.info(
                "transfer.receive",
                extra={
                    "transfer_id": locked.pk,
                    "destination_id": locked.destination_branch_id,
                },
            )
            return locked

    @classmethod
    def reject_transfer(cls, transfer, reason: str, *, user=None) -> Transfer:
        """
        Refuse an IN_TRANSIT transfer and credit the origin back.

        Raises:
            ValidationError('REASON_REQUIRED')
            InvalidStateTransition: not IN_TRANSIT
        """
        reason = (reason or '').strip()
        if not reason:
            raise ValidationError('REASON_REQUIRED')

        with transaction.atomic():
            locked = cls._lock(transfer)
            cls._require_in_transit(locked)

            for line in locked.lines.order_by('product_id'):
                InventoryLedger.adjust(
                    line.product_id,
                    locked.origin_branch_id,
                    line.quantity_sent,
                    kind=MovementKind.TRANSFER_RETURN,
                    reason=f"Traspaso #{locked.pk} rechazado: {reason}"[:255],
                    reference=locked,
                    user=user,
                )

            locked.state = TransferState.REJECTED
            locked.rejected_at = timezone.now()
            locked.rejection_reason = reason[:255]
            locked.save(update_fields=['state', 'rejected_at', 'rejection_reason'])

            logger.warning(
                "transfer.reject",
                extra={
                    "transfer_id": locked.pk,
                    "origin_id": locked.origin_branch_id,
                    "reason": reason,
                },
            )
            return locked

    # ══════════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def list_incoming(cls, branch, state: str | None = None) -> list[Transfer]:
        """Transfers addressed to branch, newest first."""
        qs = Transfer.objects.incoming(pk_of(branch))
        if state is not None:
            qs = qs.filter(state=state)
        return list(
            qs.select_related('origin_branch', 'destination_branch')
            .order_by('-sent_at', '-pk')
        )

    @classmethod
    def list_history(cls, branch) -> list[Transfer]:
        """Finished transfers where branch is origin or destination, newest first."""
        return list(
            Transfer.objects.involving(pk_of(branch))
            .terminal()
            .select_related('origin_branch', 'destination_branch')
            .order_by('-sent_at', '-pk')
        )

    @classmethod
    def transfer_lines(cls, transfer) -> list[TransferLineItem]:
        """Detail lines with their products."""
        return list(
            TransferLineItem.objects
            .filter(transfer_id=pk_of(transfer))
            .select_related('product')
            .order_by('pk')
        )

    # ══════════════════════════════════════════════════════════════
    # INTERNAL
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _lock(cls, transfer) -> Transfer:
        locked = Transfer.objects.select_for_update().filter(pk=pk_of(transfer)).first()
        if locked is None:
            raise ValidationError('TRANSFER_NOT_FOUND', transfer_id=pk_of(transfer))
        return locked

    @classmethod
    def _require_in_transit(cls, transfer: Transfer):
        if transfer.state != TransferState.IN_TRANSIT:
            raise InvalidStateTransition(
                transfer_id=transfer.pk,
                current=transfer.state,
                expected=TransferState.IN_TRANSIT.value,
            )
