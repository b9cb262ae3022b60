"""
Code generation: SKU, EAN-13 and provider visual codes backed by counters.

Generation is side-effect free. Counters move only when the row carrying the
generated code is written (create_product, register_provider,
change_provider_letter), inside the same transaction.
"""

import logging
from decimal import Decimal
from typing import NamedTuple

from django.db import IntegrityError, transaction

from branchstock import codes
from branchstock.conf import branchstock_settings
from branchstock.exceptions import DuplicateIdentifier, ValidationError
from branchstock.models.catalog import Product, Provider
from branchstock.services.sequences import ProviderSequenceStore

logger = logging.getLogger('branchstock')


class GeneratedCodes(NamedTuple):
    sku: str
    barcode: str
    sequence: int


class CodeGenerator:
    """Product and provider code generation."""

    @classmethod
    def next_sku(cls, provider) -> GeneratedCodes:
        """
        Next SKU and EAN-13 for a provider, without advancing anything.

        Uses the stored counter + 1: counter 4 on "B001" gives
        GeneratedCodes("B001-00005", "2005500005003", 5).

        Raises:
            ValidationError('MISSING_CODE_CONFIG'): provider lacks visual_code or ean_global_id
        """
        if not provider.visual_code or provider.ean_global_id is None:
            raise ValidationError('MISSING_CODE_CONFIG', provider_id=provider.pk)

        sequence = ProviderSequenceStore.last_sku_sequence(provider) + 1
        return GeneratedCodes(
            sku=codes.format_sku(provider.visual_code, sequence),
            barcode=cls.next_ean13(provider, sequence),
            sequence=sequence,
        )

    @classmethod
    def next_ean13(cls, provider, sequence: int) -> str:
        """EAN-13 for a provider's sequence number."""
        if provider.ean_global_id is None:
            raise ValidationError('MISSING_CODE_CONFIG', provider_id=provider.pk)
        return codes.build_ean13(
            provider.ean_global_id,
            sequence,
            prefix=branchstock_settings.EAN_PREFIX,
            filler=branchstock_settings.EAN_FILLER,
        )

    @classmethod
    def next_visual_code(cls, letter: str, provider=None) -> tuple[str, int]:
        """
        Next visual code for a letter: ("B003", 3) after B001 and B002.

        Resubmitting the letter a provider already holds returns its stored
        code unchanged, so editing a provider never burns a number.
        """
        letter = codes.normalize_letter(letter)

        if (
            provider is not None
            and provider.pk
            and provider.letter_prefix == letter
            and provider.letter_sequence
        ):
            return provider.visual_code, provider.letter_sequence

        sequence = ProviderSequenceStore.max_letter_sequence(letter) + 1
        return codes.format_visual_code(letter, sequence), sequence

    # ══════════════════════════════════════════════════════════════
    # PERSISTING
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create_product(cls, provider, name: str, sale_price, cost_price=Decimal('0'),
                       *, retries: int | None = None, **fields) -> Product:
        """
        Create a product with freshly generated SKU and barcode.

        The product insert and the counter advance share one savepoint. A
        collision on sku/barcode rolls both back; the counter is then moved
        past the taken number and generation is retried.

        Raises:
            ValidationError('MISSING_CODE_CONFIG')
            DuplicateIdentifier('DUPLICATE_SKU' | 'DUPLICATE_BARCODE'): retries exhausted
        """
        if retries is None:
            retries = branchstock_settings.SKU_RETRIES

        attempt = 0
        while True:
            generated = cls.next_sku(provider)
            try:
                with transaction.atomic():
                    product = Product.objects.create(
                        provider=provider,
                        name=name,
                        sku=generated.sku,
                        barcode=generated.barcode,
                        sale_price=sale_price,
                        cost_price=cost_price,
                        **fields,
                    )
                    ProviderSequenceStore.advance_sku_sequence(provider, generated.sequence)
            except IntegrityError as exc:
                error = cls._duplicate_product_error(generated)
                if error is None:
                    raise
                if attempt >= retries:
                    raise error from exc

                attempt += 1
                logger.warning(
                    "codes.create_product.retry",
                    extra={
                        "provider_id": provider.pk,
                        "code": error.code,
                        "sku": generated.sku,
                        "attempt": attempt,
                    },
                )
                ProviderSequenceStore.advance_sku_sequence(provider, generated.sequence)
                provider.refresh_from_db()
                continue

            logger.info(
                "codes.create_product",
                extra={
                    "provider_id": provider.pk,
                    "product_id": product.pk,
                    "sku": product.sku,
                    "barcode": product.barcode,
                },
            )
            return product

    @classmethod
    def register_provider(cls, name: str, letter: str, ean_global_id: int | None, **fields) -> Provider:
        """
        Create a provider with the next visual code for its letter.

        Raises:
            ValidationError('INVALID_LETTER' | 'INVALID_GLOBAL_ID')
            DuplicateIdentifier('DUPLICATE_VISUAL_CODE'): concurrent registration took the number
        """
        cls._check_global_id(ean_global_id)
        visual_code, sequence = cls.next_visual_code(letter)

        try:
            with transaction.atomic():
                provider = Provider.objects.create(
                    name=name,
                    visual_code=visual_code,
                    letter_prefix=visual_code[0],
                    letter_sequence=sequence,
                    ean_global_id=ean_global_id,
                    **fields,
                )
        except IntegrityError as exc:
            raise DuplicateIdentifier(
                'DUPLICATE_VISUAL_CODE', visual_code=visual_code,
            ) from exc

        logger.info(
            "codes.register_provider",
            extra={"provider_id": provider.pk, "visual_code": visual_code},
        )
        return provider

    @classmethod
    def change_provider_letter(cls, provider, letter: str) -> Provider:
        """
        Reassign a provider's letter. Same letter = no change, no new number.

        Already issued SKUs keep their old visual code.
        """
        visual_code, sequence = cls.next_visual_code(letter, provider)
        if visual_code == provider.visual_code and sequence == provider.letter_sequence:
            return provider

        provider.visual_code = visual_code
        provider.letter_prefix = visual_code[0]
        provider.letter_sequence = sequence
        try:
            with transaction.atomic():
                provider.save(update_fields=[
                    'visual_code', 'letter_prefix', 'letter_sequence', 'updated_at',
                ])
        except IntegrityError as exc:
            provider.refresh_from_db()
            raise DuplicateIdentifier(
                'DUPLICATE_VISUAL_CODE', visual_code=visual_code,
            ) from exc

        logger.info(
            "codes.change_provider_letter",
            extra={"provider_id": provider.pk, "visual_code": visual_code},
        )
        return provider

    # ══════════════════════════════════════════════════════════════
    # INTERNAL
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _check_global_id(cls, ean_global_id):
        if ean_global_id is None:
            return
        if not codes.is_valid_global_id(ean_global_id):
            raise ValidationError('INVALID_GLOBAL_ID', ean_global_id=ean_global_id)
        if Provider.objects.filter(ean_global_id=ean_global_id).exists():
            raise ValidationError(
                'INVALID_GLOBAL_ID',
                'El ID global EAN ya está asignado a otro empresario',
                ean_global_id=ean_global_id,
            )

    @classmethod
    def _duplicate_product_error(cls, generated: GeneratedCodes) -> DuplicateIdentifier | None:
        if Product.objects.filter(sku=generated.sku).exists():
            return DuplicateIdentifier('DUPLICATE_SKU', sku=generated.sku)
        if generated.barcode and Product.objects.filter(barcode=generated.barcode).exists():
            return DuplicateIdentifier('DUPLICATE_BARCODE', barcode=generated.barcode)
        return None
