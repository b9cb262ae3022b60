"""
Provider counters: read and advance SKU and letter sequences.

The SKU counter is advanced only after the product carrying the new SKU has
been written, and only forward: a conditional UPDATE ... WHERE value < new
makes concurrent and out-of-order advances harmless.
"""

import logging

from django.db.models import Max

from branchstock.models.catalog import Provider

logger = logging.getLogger('branchstock')


class ProviderSequenceStore:
    """Provider counter reads and monotonic advances."""

    @classmethod
    def last_sku_sequence(cls, provider) -> int:
        """Current SKU counter, read from the database (0 if never used)."""
        value = (
            Provider.objects
            .filter(pk=provider.pk)
            .values_list('last_sku_sequence', flat=True)
            .first()
        )
        return value or 0

    @classmethod
    def advance_sku_sequence(cls, provider, value: int) -> bool:
        """
        Move the SKU counter to `value` if it is currently lower.

        Returns:
            True if the counter moved, False if it was already >= value.
        """
        updated = Provider.objects.filter(
            pk=provider.pk,
            last_sku_sequence__lt=value,
        ).update(last_sku_sequence=value)

        if updated:
            provider.last_sku_sequence = value
            logger.info(
                "sequence.advance_sku",
                extra={"provider_id": provider.pk, "value": value},
            )
        return bool(updated)

    @classmethod
    def max_letter_sequence(cls, letter: str) -> int:
        """Highest letter_sequence issued for `letter` across providers (0 if none)."""
        result = Provider.objects.filter(letter_prefix=letter).aggregate(
            m=Max('letter_sequence')
        )['m']
        return result or 0
