"""
Inventory queries — read-only operations.

All methods are classmethods and use no locking.
"""

from dataclasses import dataclass

from django.db.models import Sum
from django.db.models.functions import Coalesce

from branchstock.exceptions import ValidationError
from branchstock.models.branch import Branch
from branchstock.models.catalog import Product
from branchstock.models.inventory import InventoryRecord
from branchstock.services.ledger import pk_of


@dataclass(frozen=True)
class InventoryView:
    """A catalog product joined with its quantity at one branch."""

    product: Product
    branch: Branch
    quantity: int

    @property
    def in_stock(self) -> bool:
        return self.quantity > 0


class InventoryQueries:
    """Read-only inventory query methods."""

    @classmethod
    def resolve_branch(cls, branch=None) -> Branch:
        """
        Branch to operate on.

        Args:
            branch: Branch instance or pk. None = the primary branch.

        Raises:
            ValidationError('BRANCH_NOT_FOUND'): unknown or inactive branch
            ValidationError('NO_PRIMARY_BRANCH'): none given and no primary configured
        """
        active = Branch.objects.filter(is_active=True)

        if branch is None:
            primary = active.filter(is_primary=True).first()
            if primary is None:
                raise ValidationError('NO_PRIMARY_BRANCH')
            return primary

        resolved = active.filter(pk=pk_of(branch)).first()
        if resolved is None:
            raise ValidationError('BRANCH_NOT_FOUND', branch_id=pk_of(branch))
        return resolved

    @classmethod
    def branch_inventory(cls, branch, provider=None, in_stock_only: bool = False) -> list[InventoryView]:
        """
        Active products with their quantity at branch.

        Args:
            branch: Branch instance or pk
            provider: Only this provider's products (None = all)
            in_stock_only: Drop products with quantity 0

        Returns:
            InventoryView list ordered by product name. Products without a
            record appear with quantity 0 unless in_stock_only.
        """
        branch = cls.resolve_branch(branch)

        products = Product.objects.filter(is_active=True).select_related('provider')
        if provider is not None:
            products = products.filter(provider_id=pk_of(provider))

        quantities = dict(
            InventoryRecord.objects
            .at_branch(branch)
            .values_list('product_id', 'quantity')
        )

        views = [
            InventoryView(product=product, branch=branch, quantity=quantities.get(product.pk, 0))
            for product in products.order_by('name', 'pk')
        ]
        if in_stock_only:
            views = [view for view in views if view.in_stock]
        return views

    @classmethod
    def total_on_hand(cls, product) -> int:
        """Quantity of product summed across all branches."""
        return InventoryRecord.objects.filter(product_id=pk_of(product)).aggregate(
            t=Coalesce(Sum('quantity'), 0)
        )['t']
