"""Net weight derivation with manual override."""

from __future__ import annotations

from dataclasses import fields, replace

from .formatting import coerce_number
from .models import NUMERIC_FIELDS, Receipt

_EDITABLE = {f.name for f in fields(Receipt)} - {"id"}


def compute_net_weight(gross, tare, manual: bool, current=0) -> int | float:
    """Return gross - tare, or ``current`` unchanged when the user owns it."""
    if manual:
        return current
    return coerce_number(coerce_number(gross) - coerce_number(tare))


def refresh_net_weight(receipt: Receipt) -> Receipt:
    """Recompute the derived net weight of a record that became current."""
    net = compute_net_weight(
        receipt.gross_weight,
        receipt.tare_weight,
        receipt.manual_net_weight,
        receipt.net_weight,
    )
    return replace(receipt, net_weight=net)


def apply_edit(receipt: Receipt, name: str, value) -> Receipt:
    """Apply one field edit and return the updated record.

    Editing ``net_weight`` switches the record to manual mode for good;
    editing gross or tare recomputes the net weight otherwise.

    Raises:
        KeyError: If ``name`` is not an editable receipt field.
    """
    if name not in _EDITABLE:
        raise KeyError(f"Unknown receipt field: {name!r}")

    if name in NUMERIC_FIELDS:
        value = coerce_number(value)
    elif name == "manual_net_weight":
        value = bool(value)
    else:
        value = "" if value is None else str(value)

    updated = replace(receipt, **{name: value})
    if name == "net_weight":
        return replace(updated, manual_net_weight=True)
    if name in ("gross_weight", "tare_weight", "manual_net_weight"):
        return refresh_net_weight(updated)
    return updated
