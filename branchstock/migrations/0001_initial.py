"""
Initial migration for Branchstock models.
"""

from decimal import Decimal
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Branchstock models: catalog, ledger, supply, transfers, sales."""

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Branch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.SlugField(help_text='Identificador único (ej: matriz, norte)', unique=True, verbose_name='Código')),
                ('name', models.CharField(max_length=100, verbose_name='Nombre')),
                ('is_primary', models.BooleanField(default=False, help_text='Sucursal por defecto cuando no se indica otra.', verbose_name='Matriz')),
                ('is_active', models.BooleanField(default=True, verbose_name='Activa')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Sucursal',
                'verbose_name_plural': 'Sucursales',
                'ordering': ['name'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('is_primary', True)), fields=('is_primary',), name='unique_primary_branch'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Provider',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Nombre')),
                ('visual_code', models.CharField(blank=True, default='', help_text='Letra + consecutivo, ej: B001', max_length=10, verbose_name='Código Visual')),
                ('letter_prefix', models.CharField(blank=True, default='', max_length=1, verbose_name='Letra')),
                ('letter_sequence', models.PositiveIntegerField(default=0, verbose_name='Consecutivo de letra')),
                ('ean_global_id', models.PositiveSmallIntegerField(blank=True, help_text='0-999. Bloque del empresario dentro del EAN-13.', null=True, unique=True, verbose_name='ID Global EAN')),
                ('last_sku_sequence', models.PositiveIntegerField(default=0, verbose_name='Último consecutivo SKU')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Empresario',
                'verbose_name_plural': 'Empresarios',
                'ordering': ['name'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('visual_code', ''), _negated=True), fields=('visual_code',), name='unique_provider_visual_code'),
                    models.UniqueConstraint(condition=models.Q(('letter_prefix', ''), _negated=True), fields=('letter_prefix', 'letter_sequence'), name='unique_provider_letter_sequence'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Nombre')),
                ('sku', models.CharField(max_length=32, unique=True, verbose_name='SKU')),
                ('barcode', models.CharField(blank=True, default='', max_length=13, verbose_name='Código de barras')),
                ('sale_price', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Precio de venta')),
                ('cost_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='Costo')),
                ('is_active', models.BooleanField(default=True, verbose_name='Activo')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('provider', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='products', to='branchstock.provider', verbose_name='Empresario')),
            ],
            options={
                'verbose_name': 'Producto',
                'verbose_name_plural': 'Productos',
                'ordering': ['name'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('barcode', ''), _negated=True), fields=('barcode',), name='unique_product_barcode'),
                ],
            },
        ),
        migrations.CreateModel(
            name='InventoryRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.IntegerField(default=0, verbose_name='Cantidad')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('branch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='inventory_records', to='branchstock.branch', verbose_name='Sucursal')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='inventory_records', to='branchstock.product', verbose_name='Producto')),
            ],
            options={
                'verbose_name': 'Existencia',
                'verbose_name_plural': 'Existencias',
                'constraints': [
                    models.UniqueConstraint(fields=('product', 'branch'), name='unique_inventory_record'),
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 0)), name='inventory_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Movement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('delta', models.IntegerField(help_text='Positivo = entrada, Negativo = salida', verbose_name='Variación')),
                ('kind', models.CharField(choices=[('supply', 'Entrada'), ('sale', 'Venta'), ('transfer_out', 'Traspaso enviado'), ('transfer_in', 'Traspaso recibido'), ('transfer_return', 'Traspaso devuelto'), ('adjustment', 'Ajuste')], max_length=20, verbose_name='Tipo')),
                ('reference_id', models.PositiveBigIntegerField(blank=True, null=True, verbose_name='ID de Referencia')),
                ('reason', models.CharField(help_text='Obligatorio. Ej: "Lote 20250301-ACME", "Traspaso #12"', max_length=255, verbose_name='Motivo')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadatos')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Fecha/Hora')),
                ('record', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='branchstock.inventoryrecord', verbose_name='Existencia')),
                ('reference_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='contenttypes.contenttype', verbose_name='Tipo de Referencia')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL, verbose_name='Usuario')),
            ],
            options={
                'verbose_name': 'Movimiento',
                'verbose_name_plural': 'Movimientos',
                'ordering': ['timestamp', 'pk'],
                'indexes': [
                    models.Index(fields=['record', 'timestamp'], name='branchstock_mov_record_ts'),
                    models.Index(fields=['reference_type', 'reference_id'], name='branchstock_mov_reference'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SupplyBatch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('batch_code', models.CharField(help_text='Único por empresario. Repetirlo fusiona la entrada.', max_length=100, verbose_name='Código de Lote')),
                ('total_cost', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14, verbose_name='Costo total')),
                ('received_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Fecha de entrada')),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('branch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='supply_batches', to='branchstock.branch', verbose_name='Sucursal')),
                ('provider', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='supply_batches', to='branchstock.provider', verbose_name='Empresario')),
            ],
            options={
                'verbose_name': 'Lote de Abastecimiento',
                'verbose_name_plural': 'Lotes de Abastecimiento',
                'ordering': ['-received_at'],
                'constraints': [
                    models.UniqueConstraint(fields=('provider', 'batch_code'), name='unique_supply_batch_code'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SupplyLineItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_received', models.PositiveIntegerField(verbose_name='Cantidad')),
                ('unit_cost', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Costo unitario')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='lines', to='branchstock.supplybatch', verbose_name='Lote')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='branchstock.product', verbose_name='Producto')),
            ],
            options={
                'verbose_name': 'Renglón de Lote',
                'verbose_name_plural': 'Renglones de Lote',
                'ordering': ['created_at', 'pk'],
            },
        ),
        migrations.CreateModel(
            name='Transfer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('state', models.CharField(choices=[('in_transit', 'En tránsito'), ('completed', 'Completado'), ('rejected', 'Rechazado')], db_index=True, default='in_transit', max_length=20, verbose_name='Estado')),
                ('sent_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Enviado')),
                ('received_at', models.DateTimeField(blank=True, null=True, verbose_name='Recibido')),
                ('rejected_at', models.DateTimeField(blank=True, null=True, verbose_name='Rechazado')),
                ('rejection_reason', models.CharField(blank=True, default='', max_length=255, verbose_name='Motivo de rechazo')),
                ('destination_branch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='incoming_transfers', to='branchstock.branch', verbose_name='Destino')),
                ('origin_branch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='outgoing_transfers', to='branchstock.branch', verbose_name='Origen')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Enviado por')),
            ],
            options={
                'verbose_name': 'Traspaso',
                'verbose_name_plural': 'Traspasos',
                'ordering': ['-sent_at', '-pk'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('origin_branch', models.F('destination_branch')), _negated=True), name='transfer_distinct_branches'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TransferLineItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_sent', models.PositiveIntegerField(verbose_name='Cantidad enviada')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='branchstock.product', verbose_name='Producto')),
                ('transfer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='lines', to='branchstock.transfer', verbose_name='Traspaso')),
            ],
            options={
                'verbose_name': 'Renglón de Traspaso',
                'verbose_name_plural': 'Renglones de Traspaso',
                'ordering': ['pk'],
                'constraints': [
                    models.UniqueConstraint(fields=('transfer', 'product'), name='unique_transfer_product'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Sale',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('total', models.DecimalField(decimal_places=2, max_digits=14, verbose_name='Total')),
                ('payment_method', models.CharField(choices=[('cash', 'Efectivo'), ('card', 'Tarjeta'), ('transfer', 'Transferencia')], default='cash', max_length=20, verbose_name='Método de pago')),
                ('sold_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Fecha de venta')),
                ('branch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sales', to='branchstock.branch', verbose_name='Sucursal')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Vendedor')),
            ],
            options={
                'verbose_name': 'Venta',
                'verbose_name_plural': 'Ventas',
                'ordering': ['-sold_at', '-pk'],
            },
        ),
        migrations.CreateModel(
            name='SaleLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.PositiveIntegerField(verbose_name='Cantidad')),
                ('unit_price', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Precio unitario')),
                ('line_total', models.DecimalField(decimal_places=2, max_digits=14, verbose_name='Subtotal')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='branchstock.product', verbose_name='Producto')),
                ('sale', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='lines', to='branchstock.sale', verbose_name='Venta')),
            ],
            options={
                'verbose_name': 'Renglón de Venta',
                'verbose_name_plural': 'Renglones de Venta',
                'ordering': ['pk'],
            },
        ),
    ]
