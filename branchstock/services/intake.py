"""
Supply intake — provider batches entering a branch.

A batch code is unique per provider. Receiving the same code again merges
into the existing batch: lines are appended, total_cost grows, and every
line is credited to the branch through the ledger.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from branchstock.conf import branchstock_settings
from branchstock.exceptions import ValidationError
from branchstock.models.catalog import Product, Provider
from branchstock.models.enums import MovementKind
from branchstock.models.supply import SupplyBatch, SupplyLineItem
from branchstock.services.ledger import InventoryLedger, pk_of
from branchstock.services.queries import InventoryQueries

logger = logging.getLogger('branchstock')

CENTS = Decimal('0.01')


@dataclass(frozen=True)
class IntakeLine:
    product_id: int
    quantity: int
    unit_cost: Decimal


@dataclass(frozen=True)
class BatchReceipt:
    """Result of receive_batch(): the batch, all of its lines, and whether it merged."""

    batch: SupplyBatch
    lines: list[SupplyLineItem]
    merged: bool

    @property
    def total_units(self) -> int:
        return sum(line.quantity_received for line in self.lines)


class SupplyIntake:
    """Provider intake operations."""

    @classmethod
    def receive_batch(cls, provider, branch, batch_code: str, lines: list[IntakeLine],
                      *, user=None) -> BatchReceipt:
        """
        Register a supply batch and credit its lines to the branch.

        Provider and branch may be instances or primary keys. Validation
        happens before any write. Everything below runs in one transaction;
        any failure rolls the whole intake back.

        Raises:
            ValidationError: see _validate()
        """
        batch_code = (batch_code or '').strip()
        branch, products, lines = cls._validate(provider, branch, batch_code, lines)
        provider_id = pk_of(provider)
        partial = sum(
            (line.quantity * line.unit_cost for line in lines),
            Decimal('0.00'),
        )

        with transaction.atomic():
            batch = (
                SupplyBatch.objects
                .select_for_update()
                .filter(provider_id=provider_id, batch_code=batch_code)
                .first()
            )
            merged = batch is not None

            if batch is None:
                try:
                    with transaction.atomic():
                        batch = SupplyBatch.objects.create(
                            provider_id=provider_id,
                            branch=branch,
                            batch_code=batch_code,
                            total_cost=partial,
                        )
                except IntegrityError:
                    # Concurrent intake created the same code: merge into it
                    batch = SupplyBatch.objects.select_for_update().get(
                        provider_id=provider_id, batch_code=batch_code,
                    )
                    merged = True

            if merged:
                SupplyBatch.objects.filter(pk=batch.pk).update(
                    total_cost=F('total_cost') + partial,
                )
                batch.refresh_from_db(fields=['total_cost', 'updated_at'])

            for line in sorted(lines, key=lambda line: line.product_id):
                SupplyLineItem.objects.create(
                    batch=batch,
                    product=products[line.product_id],
                    quantity_received=line.quantity,
                    unit_cost=line.unit_cost,
                )
                InventoryLedger.adjust(
                    line.product_id,
                    branch.pk,
                    line.quantity,
                    kind=MovementKind.SUPPLY,
                    reason=f"Lote {batch_code}",
                    reference=batch,
                    user=user,
                )

            logger.info(
                "supply.receive_batch",
                extra={
                    "batch_id": batch.pk,
                    "provider_id": provider_id,
                    "branch_id": branch.pk,
                    "batch_code": batch_code,
                    "lines": len(lines),
                    "partial_cost": str(partial),
                    "merged": merged,
                },
            )
            return cls.batch_receipt(batch, merged=merged)

    @classmethod
    def batch_receipt(cls, batch: SupplyBatch, merged: bool = False) -> BatchReceipt:
        """Receipt for a batch with all its lines (for audit display)."""
        lines = list(batch.lines.select_related('product').order_by('created_at', 'pk'))
        return BatchReceipt(batch=batch, lines=lines, merged=merged)

    @classmethod
    def supply_history(cls, limit: int | None = None) -> list[SupplyBatch]:
        """Latest batches, newest first."""
        if limit is None:
            limit = branchstock_settings.HISTORY_LIMIT
        return list(
            SupplyBatch.objects
            .select_related('provider', 'branch')
            .newest_first()[:limit]
        )

    @classmethod
    def default_batch_code(cls, provider, on_date: date | None = None) -> str:
        """Suggested batch code: "YYYYMMDD-PROVIDER NAME"."""
        on_date = on_date or timezone.localdate()
        return f"{on_date:%Y%m%d}-{provider.name}".upper()

    # ══════════════════════════════════════════════════════════════
    # INTERNAL
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _validate(cls, provider, branch, batch_code, lines):
        """
        Check an intake before any write.

        Returns:
            (branch, products by id, lines with unit_cost as a 2-place Decimal)
        """
        if branch is None:
            raise ValidationError('MISSING_BRANCH')
        if provider is None:
            raise ValidationError('MISSING_PROVIDER')
        if not batch_code:
            raise ValidationError('MISSING_BATCH_CODE')
        if not lines:
            raise ValidationError('EMPTY_LINES')

        provider_id = pk_of(provider)
        if not Provider.objects.filter(pk=provider_id).exists():
            raise ValidationError('PROVIDER_NOT_FOUND', provider_id=provider_id)
        branch = InventoryQueries.resolve_branch(branch)

        normalized = []
        for line in lines:
            if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity <= 0:
                raise ValidationError('INVALID_QUANTITY', product_id=line.product_id, quantity=line.quantity)
            normalized.append(IntakeLine(line.product_id, line.quantity, cls._parse_cost(line)))

        products = Product.objects.in_bulk({line.product_id for line in normalized})

        for line in normalized:
            product = products.get(line.product_id)
            if product is None:
                raise ValidationError('PRODUCT_NOT_FOUND', product_id=line.product_id)
            if branchstock_settings.ENFORCE_PROVIDER_PRODUCTS and product.provider_id != provider_id:
                raise ValidationError(
                    'PRODUCT_PROVIDER_MISMATCH',
                    product_id=product.pk,
                    provider_id=provider_id,
                )
            if line.unit_cost >= product.sale_price:
                raise ValidationError(
                    'COST_NOT_BELOW_PRICE',
                    product_id=product.pk,
                    unit_cost=line.unit_cost,
                    sale_price=product.sale_price,
                )

        return branch, products, normalized

    @classmethod
    def _parse_cost(cls, line) -> Decimal:
        """Unit cost as stored: finite, >= 0, at most 2 decimal places."""
        try:
            cost = Decimal(line.unit_cost)
            stored = cost.quantize(CENTS)
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError('INVALID_COST', product_id=line.product_id, unit_cost=line.unit_cost) from None

        if not cost.is_finite() or cost < 0 or cost != stored:
            raise ValidationError('INVALID_COST', product_id=line.product_id, unit_cost=line.unit_cost)
        return stored
