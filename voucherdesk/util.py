"""
Identifier generation for vouchers.

Voucher ids are opaque: they carry no sequence number and no student data.
Only a suffix of the id is ever shown to people.
"""

from __future__ import annotations

import logging
import random
import time
import uuid
from typing import Callable

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]

_CROCKFORD32 = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"


def _encode_crockford_base32(value: int, length: int) -> str:
    chars: list[str] = []
    for _ in range(length):
        chars.append(_CROCKFORD32[value & 31])
        value >>= 5
    return "".join(reversed(chars))


def fallback_token(*, timestamp_ms: int | None = None) -> str:
    """
    Generate a 26-char token without OS entropy.

    80 bits from the `random` module followed by the millisecond clock.
    Lower quality than uuid4, still practically unique within one desk.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    randomness = random.getrandbits(80)
    clock = timestamp_ms & ((1 << 48) - 1)
    return _encode_crockford_base32((randomness << 48) | clock, 26)


def new_voucher_id() -> str:
    """Return a new voucher id. Never raises."""
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        # os.urandom has no entropy source on this platform
        logger.warning("OS randomness unavailable; using fallback voucher id generator")
        return fallback_token()
