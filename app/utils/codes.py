# app/utils/codes.py

"""
Human-readable identifier generation.

Codes have the shape <PREFIX>-<base36 millisecond timestamp>-<base36 random>,
upper-cased. They are not unique by construction; uniqueness is enforced by
the database (UNIQUE constraints) and the registrars' existence checks.
"""

import random
import string
import time
from typing import Optional

BASE36_ALPHABET = string.digits + string.ascii_uppercase

CONTAINER_CODE_PREFIX = "CONT"
SKU_PREFIX = "KC"
PRODUCT_NAME_SUFFIX = "-3"

_rng = random.SystemRandom()


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def _random_base36(length: int) -> str:
    return "".join(_rng.choice(BASE36_ALPHABET) for _ in range(length))


def _timestamped_code(prefix: str, random_length: int, now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{prefix}-{to_base36(now_ms)}-{_random_base36(random_length)}".upper()


def generate_container_code(now_ms: Optional[int] = None) -> str:
    """e.g. CONT-LZ3K9F2A-7QX1"""
    return _timestamped_code(CONTAINER_CODE_PREFIX, 4, now_ms)


def generate_sku(now_ms: Optional[int] = None) -> str:
    """e.g. KC-LZ3K9F2A-Q7"""
    return _timestamped_code(SKU_PREFIX, 2, now_ms)


def generate_product_name() -> str:
    """Four random digits (1000-9999) followed by the fixed suffix, e.g. 4821-3."""
    return f"{_rng.randint(1000, 9999)}{PRODUCT_NAME_SUFFIX}"
