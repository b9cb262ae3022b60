"""
Branchstock Admin.

- Branch, Provider, Product: editable
- InventoryRecord: read-only (product, branch, quantity)
- Movement: read-only audit trail
- SupplyBatch, Transfer, Sale: read-only with line inlines
- Transfer: "receive" action
"""

import logging

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from branchstock.exceptions import InventoryError
from branchstock.models import (
    Branch,
    InventoryRecord,
    Movement,
    Product,
    Provider,
    Sale,
    SaleLine,
    SupplyBatch,
    SupplyLineItem,
    Transfer,
    TransferLineItem,
    TransferState,
)

logger = logging.getLogger('branchstock')


class ReadOnlyAdminMixin:
    """Stock only changes via the inventory service."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# CATALOG
# =========================================================================

@admin.register(Branch)
class BranchAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'is_primary', 'is_active']
    list_filter = ['is_primary', 'is_active']
    search_fields = ['code', 'name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Provider)
class ProviderAdmin(admin.ModelAdmin):
    """Counters are read-only here; codes come from CodeGenerator."""

    list_display = ['name', 'visual_code', 'ean_global_id', 'last_sku_sequence']
    search_fields = ['name', 'visual_code']
    readonly_fields = ['letter_sequence', 'last_sku_sequence', 'created_at', 'updated_at']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'sku', 'barcode', 'provider', 'sale_price', 'cost_price', 'is_active']
    list_filter = ['is_active', 'provider']
    search_fields = ['name', 'sku', 'barcode']
    readonly_fields = ['created_at', 'updated_at']


# =========================================================================
# LEDGER (read-only)
# =========================================================================

@admin.register(InventoryRecord)
class InventoryRecordAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['product', 'branch', 'quantity', 'updated_at']
    list_filter = ['branch']
    search_fields = ['product__name', 'product__sku']
    list_select_related = ['product', 'branch']


@admin.register(Movement)
class MovementAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Immutable audit trail."""

    list_display = ['timestamp', 'record', 'kind', 'delta', 'reason', 'user']
    list_filter = ['kind', 'timestamp']
    search_fields = ['reason']
    date_hierarchy = 'timestamp'
    list_select_related = ['record__product', 'record__branch', 'user']


# =========================================================================
# DOCUMENTS (read-only with lines)
# =========================================================================

class SupplyLineItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = SupplyLineItem
    fields = ['product', 'quantity_received', 'unit_cost', 'created_at']
    extra = 0


@admin.register(SupplyBatch)
class SupplyBatchAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['batch_code', 'provider', 'branch', 'total_cost', 'received_at']
    list_filter = ['branch', 'received_at']
    search_fields = ['batch_code', 'provider__name']
    inlines = [SupplyLineItemInline]


class TransferLineItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = TransferLineItem
    fields = ['product', 'quantity_sent']
    extra = 0


@admin.register(Transfer)
class TransferAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['id', 'origin_branch', 'destination_branch', 'state', 'sent_at', 'received_at']
    list_filter = ['state', 'origin_branch', 'destination_branch']
    inlines = [TransferLineItemInline]
    actions = ['receive_transfers']

    @admin.action(description=_('Recibir traspasos seleccionados'))
    def receive_transfers(self, request, queryset):
        from branchstock import inventory

        count = 0
        for transfer in queryset.filter(state=TransferState.IN_TRANSIT):
            try:
                inventory.receive_transfer(transfer, user=request.user)
                count += 1
            except InventoryError as exc:
                logger.warning(
                    "admin.receive_transfers",
                    extra={"transfer_id": transfer.pk, "code": exc.code},
                )
                self.message_user(
                    request,
                    _('Traspaso #{pk}: {message}').format(pk=transfer.pk, message=exc.message),
                    level=messages.WARNING,
                )

        self.message_user(request, _('{count} traspaso(s) recibido(s).').format(count=count))


class SaleLineInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = SaleLine
    fields = ['product', 'quantity', 'unit_price', 'line_total']
    extra = 0


@admin.register(Sale)
class SaleAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['id', 'branch', 'total', 'payment_method', 'sold_at', 'user']
    list_filter = ['branch', 'payment_method', 'sold_at']
    inlines = [SaleLineInline]
