"""
Voucher log.

Most-recent-first sequence of every voucher ever issued. Entries are never
removed or reordered; the only mutation is flipping `redeemed`.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from .models import Voucher
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

LEDGER_KEY = "cafe-voucher-log"

# Shortest suffix accepted by resolve(); matches the ID printed on vouchers
MIN_SUFFIX_LENGTH = 8


def prepend_voucher(vouchers: Sequence[Voucher], voucher: Voucher) -> tuple[Voucher, ...]:
    if any(v.id == voucher.id for v in vouchers):
        raise ValueError(f"Duplicate voucher id: {voucher.id}")
    return (voucher, *vouchers)


def toggle_redeemed(vouchers: Sequence[Voucher], voucher_id: str) -> tuple[Voucher, ...]:
    """Flip `redeemed` on the matching voucher. Unknown ids leave the log unchanged."""
    return tuple(v.toggled() if v.id == voucher_id else v for v in vouchers)


def decode_ledger(raw: Any) -> tuple[Voucher, ...]:
    """
    Decode a persisted voucher log, preserving stored order.

    Raises:
        ValueError: If the document is not a list of valid voucher records
    """
    if not isinstance(raw, list):
        raise ValueError(f"voucher log must be a list, got {type(raw).__name__}")
    try:
        vouchers = tuple(Voucher.from_dict(item) for item in raw)
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
        raise ValueError(f"malformed voucher record: {e}") from e
    ids = [v.id for v in vouchers]
    if len(set(ids)) != len(ids):
        raise ValueError("duplicate voucher ids in log")
    return vouchers


class VoucherLedger:
    """Persistence-backed voucher log."""

    def __init__(self, store: KeyValueStore, *, key: str = LEDGER_KEY, vouchers: Iterable[Voucher] = ()):
        self.store = store
        self.key = key
        self._vouchers: tuple[Voucher, ...] = tuple(vouchers)

    @classmethod
    def load(cls, store: KeyValueStore, *, key: str = LEDGER_KEY) -> "VoucherLedger":
        """Load the log; an absent or corrupt document yields an empty log."""
        raw = store.load(key, None)
        if raw is None:
            return cls(store, key=key)
        try:
            vouchers = decode_ledger(raw)
        except ValueError as e:
            logger.warning("Corrupt voucher log under %r (%s); starting empty", key, e)
            vouchers = ()
        return cls(store, key=key, vouchers=vouchers)

    def list_vouchers(self) -> tuple[Voucher, ...]:
        """All vouchers, most recent first, in issuance order."""
        return self._vouchers

    def __len__(self) -> int:
        return len(self._vouchers)

    def get(self, voucher_id: str) -> Voucher | None:
        for v in self._vouchers:
            if v.id == voucher_id:
                return v
        return None

    def contains(self, voucher_id: str) -> bool:
        return self.get(voucher_id) is not None

    def replace(self, vouchers: Iterable[Voucher]) -> None:
        """Swap in a new log tuple without persisting it."""
        self._vouchers = tuple(vouchers)

    def toggle_redeemed(self, voucher_id: str) -> None:
        if not self.contains(voucher_id):
            logger.debug("toggle ignored: unknown voucher %s", voucher_id)
            return
        self._vouchers = toggle_redeemed(self._vouchers, voucher_id)
        logger.info("voucher %s redeemed=%s", voucher_id, self.get(voucher_id).redeemed)
        self.persist()

    def resolve(self, ref: str) -> Voucher | None:
        """
        Find a voucher by full id or by a displayed suffix.

        Suffix matching is case-insensitive and needs at least
        MIN_SUFFIX_LENGTH characters; a suffix matching more than one voucher
        resolves to nothing.
        """
        ref = ref.strip()
        if not ref:
            return None
        exact = self.get(ref)
        if exact is not None:
            return exact
        if len(ref) < MIN_SUFFIX_LENGTH:
            return None
        needle = ref.lower()
        matches = [v for v in self._vouchers if v.id.lower().endswith(needle)]
        return matches[0] if len(matches) == 1 else None

    def persist(self) -> None:
        self.store.save(self.key, [v.to_dict() for v in self._vouchers])
