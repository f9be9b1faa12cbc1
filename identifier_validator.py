"""
identifier_validator.py

Format and check-digit validation for national identity numbers (RUN style,
e.g. ``12.345.678-5`` or ``12345678-5``).

The check character is computed with the modulo-11 scheme: body digits are
weighted right-to-left with the cyclic series 2,3,4,5,6,7 and the remainder
of the weighted sum decides the expected character ('0'-'9' or 'K').
"""

from __future__ import annotations
import re
from typing import Optional

# 1-2 digits, optional dot groups of 3+3 digits, dash, check digit or K
IDENTIFIER_PATTERN = re.compile(r"[0-9]{1,2}\.?[0-9]{3}\.?[0-9]{3}-[0-9kK]")

_WEIGHTS = (2, 3, 4, 5, 6, 7)


def validate_format(identifier: Optional[str]) -> bool:
    """
    Check that `identifier` has the expected shape.

    Accepts ``XXXXXXXX-X`` and ``XX.XXX.XXX-X`` (7 or 8 body digits), where the
    trailing check character is a digit or the letter K in either case.
    Returns False for None or empty strings.
    """
    if not identifier:
        return False
    return IDENTIFIER_PATTERN.fullmatch(identifier) is not None


def clean_identifier(identifier: Optional[str]) -> str:
    """Strip grouping dots and the dash separator."""
    if identifier is None:
        return ""
    return identifier.replace(".", "").replace("-", "")


def compute_check_digit(body: str) -> str:
    """
    Compute the expected check character for the digits in `body`.

    Args:
        body: identifier digits without separators and without check character.

    Returns:
        '0' when the modulo-11 result is 11, 'K' when it is 10, the digit otherwise.
    """
    total = 0
    for position, digit in enumerate(reversed(body)):
        total += int(digit) * _WEIGHTS[position % len(_WEIGHTS)]
    result = 11 - (total % 11)
    if result == 11:
        return "0"
    if result == 10:
        return "K"
    return str(result)


def validate_check_digit(identifier: Optional[str]) -> bool:
    """
    Check that the trailing character matches the modulo-11 check digit.

    The identifier must pass `validate_format` first; the letter comparison is
    case-insensitive ('k' == 'K').
    """
    if not validate_format(identifier):
        return False
    cleaned = clean_identifier(identifier)
    body, supplied = cleaned[:-1], cleaned[-1]
    return compute_check_digit(body) == supplied.upper()


def validate(identifier: Optional[str]) -> bool:
    """Full validation: format and check digit."""
    return validate_format(identifier) and validate_check_digit(identifier)
