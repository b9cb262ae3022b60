"""
Sales: point-of-sale decrements through the ledger.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction

from branchstock.exceptions import ValidationError
from branchstock.models.catalog import Product
from branchstock.models.enums import MovementKind, PaymentMethod
from branchstock.models.sale import Sale, SaleLine
from branchstock.services.ledger import InventoryLedger
from branchstock.services.queries import InventoryQueries

logger = logging.getLogger('branchstock')


@dataclass(frozen=True)
class SaleLineRequest:
    product_id: int
    quantity: int


class SalesTransaction:

    @classmethod
    def record_sale(cls, branch, lines: list[SaleLineRequest], *,
                    payment_method: str = PaymentMethod.CASH, user=None) -> Sale:
        """
        Record a sale and decrement every line at branch.

        All or nothing: one short line aborts the whole sale.

        Raises:
            ValidationError: missing or unknown branch, empty lines, bad quantity, unknown product
            InsufficientStock
        """
        if branch is None:
            raise ValidationError('MISSING_BRANCH')
        if not lines:
            raise ValidationError('EMPTY_LINES')

        quantities = defaultdict(int)
        for line in lines:
            if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity <= 0:
                raise ValidationError('INVALID_QUANTITY', product_id=line.product_id, quantity=line.quantity)
            quantities[line.product_id] += line.quantity

        products = Product.objects.in_bulk(list(quantities))
        missing = sorted(set(quantities) - set(products))
        if missing:
            raise ValidationError('PRODUCT_NOT_FOUND', product_id=missing[0])
        branch = InventoryQueries.resolve_branch(branch)

        with transaction.atomic():
            sale = Sale.objects.create(
                branch=branch,
                total=Decimal('0'),
                payment_method=payment_method,
                user=user,
            )
            total = Decimal('0')

            for product_id in sorted(quantities):
                product = products[product_id]
                quantity = quantities[product_id]
                InventoryLedger.adjust(
                    product_id,
                    sale.branch_id,
                    -quantity,
                    kind=MovementKind.SALE,
                    reason=f"Venta #{sale.pk}",
                    reference=sale,
                    user=user,
                )
                line_total = product.sale_price * quantity
                SaleLine.objects.create(
                    sale=sale,
                    product=product,
                    quantity=quantity,
                    unit_price=product.sale_price,
                    line_total=line_total,
                )
                total += line_total

            sale.total = total
            sale.save(update_fields=['total'])

            logger.info(
                "sale.record",
                extra={
                    "sale_id": sale.pk,
                    "branch_id": sale.branch_id,
                    "total": str(total),
                    "payment_method": str(payment_method),
                },
            )
            return sale
