"""Saved receipt history backed by the key-value store."""

from __future__ import annotations

import functools
import logging
import time
from dataclasses import replace

from .db import KeyValueStore
from .models import Receipt
from .notify import Notifier, PendingAction

logger = logging.getLogger(__name__)

RECEIPTS_KEY = "weight_receipts"

DELETE_PROMPT = (
    "Are you sure you want to delete this receipt? This action cannot be undone."
)


class ReceiptCollection:
    """Saved receipts, most recently added first.

    The whole list is written back to the store after every change.
    """

    def __init__(self, store: KeyValueStore, notifier: Notifier | None = None) -> None:
        self._store = store
        self._notifier = notifier or Notifier()
        self._receipts: list[Receipt] = self._load_all()
        self._last_id = max(
            (r.id for r in self._receipts if r.id is not None), default=0
        )

    def _load_all(self) -> list[Receipt]:
        raw = self._store.get_json(RECEIPTS_KEY, default=[])
        if not isinstance(raw, list):
            logger.warning("Stored receipts are not a list; starting empty")
            return []
        receipts: list[Receipt] = []
        for entry in raw:
            if not isinstance(entry, dict):
                logger.warning("Skipping malformed receipt entry: %r", entry)
                continue
            try:
                receipts.append(Receipt.from_dict(entry))
            except (TypeError, ValueError, OverflowError) as e:
                logger.warning("Skipping unreadable receipt entry: %s", e)
        logger.debug("Loaded %d saved receipts", len(receipts))
        return receipts

    def _persist(self) -> None:
        self._store.set_json(RECEIPTS_KEY, [r.to_dict() for r in self._receipts])

    def __len__(self) -> int:
        return len(self._receipts)

    def all(self) -> list[Receipt]:
        return [replace(r) for r in self._receipts]

    def next_id(self) -> int:
        """Time-based id, strictly increasing within this session."""
        candidate = max(int(time.time() * 1000), self._last_id + 1)
        self._last_id = candidate
        return candidate

    def _index_of(self, receipt_id: int | None) -> int:
        for i, r in enumerate(self._receipts):
            if r.id == receipt_id:
                return i
        return -1

    def save(self, receipt: Receipt) -> Receipt:
        """Update the matching entry in place, or prepend a new one.

        Returns:
            The stored copy, carrying its assigned id.
        """
        stored = replace(receipt)
        index = self._index_of(stored.id) if stored.id is not None else -1
        if index >= 0:
            self._receipts[index] = stored
            logger.info("Updated receipt %s", stored.id)
        else:
            if stored.id is None:
                stored.id = self.next_id()
            else:
                self._last_id = max(self._last_id, stored.id)
            self._receipts.insert(0, stored)
            logger.info("Added receipt %s", stored.id)
        self._persist()
        self._notifier.success("Receipt Saved!")
        return replace(stored)

    def request_delete(self, receipt_id: int) -> PendingAction:
        """First phase of a delete: nothing changes until ``confirm()``."""
        return PendingAction(
            prompt=DELETE_PROMPT,
            operation=functools.partial(self.delete, receipt_id),
        )

    def delete(self, receipt_id: int) -> bool:
        """Remove the receipt with ``receipt_id``.

        Returns:
            True if an entry was removed.
        """
        index = self._index_of(receipt_id)
        removed = index >= 0
        if removed:
            del self._receipts[index]
            logger.info("Deleted receipt %s", receipt_id)
        self._persist()
        self._notifier.success("Receipt deleted.")
        return removed

    def search(self, query: str) -> list[Receipt]:
        """Filter by vehicle number, customer or RST number, keeping order.

        Vehicle and customer match case-insensitively; the RST number is a
        plain substring match.
        """
        if not query:
            return self.all()
        needle = query.lower()
        return [
            replace(r)
            for r in self._receipts
            if needle in r.vehicle_no.lower()
            or needle in r.customer.lower()
            or (r.rst_no and query in str(r.rst_no))
        ]

    def load(self, receipt_id: int) -> Receipt:
        """Return a copy of a saved receipt.

        Raises:
            KeyError: If no receipt has this id.
        """
        index = self._index_of(receipt_id)
        if index < 0:
            raise KeyError(f"No saved receipt with id {receipt_id}")
        return replace(self._receipts[index])
