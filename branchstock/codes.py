"""
Product code formatting: SKU, EAN-13 and provider visual codes.

Pure functions, no database access. The service layer
(branchstock.services.codes.CodeGenerator) feeds them provider counters.

    >>> format_sku("B001", 5)
    'B001-00005'
    >>> build_ean13(55, 5)
    '2005500005003'
    >>> format_visual_code("B", 1)
    'B001'
"""

import re

from branchstock.exceptions import ValidationError

SKU_SEPARATOR = '-'

_SKU_RE = re.compile(r'^(?P<visual>.+)-(?P<seq>\d+)$')
_LETTER_RE = re.compile(r'^[A-Z]$')


def format_sku(visual_code: str, sequence: int) -> str:
    """SKU = visual code + '-' + sequence zero-padded to 5 digits."""
    return f"{visual_code}{SKU_SEPARATOR}{sequence:05d}"


def parse_sku_sequence(sku: str) -> int | None:
    """
    Sequence number embedded in a generated SKU.

    Returns None for SKUs that were not produced by format_sku().
    """
    match = _SKU_RE.match(sku or '')
    if not match:
        return None
    return int(match.group('seq'))


def ean13_checksum(base12: str) -> int:
    """
    Standard EAN-13 check digit.

    Digits at even 0-based positions weigh 1, odd positions weigh 3.
    Check digit = (10 - sum % 10) % 10.

    Raises:
        ValidationError('INVALID_EAN_BASE'): base is not exactly 12 digits
    """
    if not isinstance(base12, str) or len(base12) != 12 or not base12.isdigit():
        raise ValidationError('INVALID_EAN_BASE', base=base12)

    total = sum(
        int(digit) * (3 if i % 2 else 1)
        for i, digit in enumerate(base12)
    )
    return (10 - total % 10) % 10


def build_ean13(ean_global_id: int, sequence: int, prefix: str = '20', filler: str = '00') -> str:
    """
    Internal-use EAN-13: prefix(2) + global id(3) + sequence(5) + filler(2) + check(1).

    Raises:
        ValidationError('INVALID_GLOBAL_ID'): id outside 0-999
        ValidationError('INVALID_EAN_BASE'): sequence too wide or bad prefix/filler
    """
    if not is_valid_global_id(ean_global_id):
        raise ValidationError('INVALID_GLOBAL_ID', ean_global_id=ean_global_id)

    base = f"{prefix}{ean_global_id:03d}{int(sequence):05d}{filler}"
    return f"{base}{ean13_checksum(base)}"


def is_valid_global_id(value) -> bool:
    """EAN global ids are plain integers 0-999."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 999


def normalize_letter(letter: str) -> str:
    """
    Upper-case a prefix letter and check it is a single A-Z character.

    Raises:
        ValidationError('INVALID_LETTER')
    """
    value = (letter or '').strip().upper()
    if not _LETTER_RE.match(value):
        raise ValidationError('INVALID_LETTER', letter=letter)
    return value


def format_visual_code(letter: str, sequence: int) -> str:
    """Visual code = letter + sequence zero-padded to 3 digits."""
    return f"{normalize_letter(letter)}{sequence:03d}"
