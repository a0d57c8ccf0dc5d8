"""Single-copy receipt layout.

``render_receipt`` turns a :class:`Receipt` and the shop's
:class:`TemplateConfig` into a :class:`ReceiptDocument`: a plain description
of what goes where on the slip. Both the PDF writer and the text preview
draw from this one structure, so the printed copy and the preview cannot
drift apart.
"""

from __future__ import annotations

from dataclasses import dataclass

from .formatting import format_date, format_number, format_time, weight_to_words
from .models import Receipt, TemplateConfig

OPERATOR_SIGNATURE = "OPERATOR'S SIGNATURE:"
PARTY_SIGNATURE = "PARTY'S SIGN:"


@dataclass
class LabeledValue:
    label: str
    value: str


@dataclass
class InfoRow:
    """One line of the details block: a left column and an optional right one."""

    left: LabeledValue
    right: LabeledValue | None = None


@dataclass
class WeightRow:
    label: str
    value: str
    unit: str = "kg"
    date: str | None = None  # None on the NET row, which carries words instead
    time: str | None = None
    words: str | None = None


@dataclass
class ChargesLine:
    label: str
    currency: str
    value: str


@dataclass
class ReceiptDocument:
    company_name: str
    address_lines: list[str]
    info_rows: list[InfoRow]
    weight_rows: list[WeightRow]
    charges: ChargesLine | None
    signatures: tuple[str, str]
    footer_lines: list[str]
    note: str | None = None

    def to_text(self, width: int = 78) -> str:
        """Monospaced preview of the slip."""
        lines: list[str] = []
        lines.append(self.company_name.upper().center(width).rstrip())
        for line in self.address_lines:
            lines.append(line.upper().center(width).rstrip())
        lines.append("")

        half = width // 2
        for row in self.info_rows:
            left = f"{row.left.label:<10} : {row.left.value}"
            if row.right is None:
                lines.append(left.rstrip())
                continue
            right = f"{row.right.label:<10} : {row.right.value}"
            lines.append(f"{left:<{half}}{right}".rstrip())

        rule = "-" * width
        lines.append(rule)
        for w in self.weight_rows:
            left = f"{w.label:<8} : {w.value:>8} {w.unit}"
            if w.words is not None:
                lines.append(f"{left:<{half}}{w.words}".rstrip())
            else:
                right = f"Date: {w.date or '':<10}  Time: {w.time or ''}"
                lines.append(f"{left:<{half}}{right}".rstrip())
        lines.append(rule)

        if self.charges is not None:
            lines.append(
                f"{self.charges.label} {self.charges.currency} {self.charges.value}"
            )
            lines.append(rule)

        lines.append("")
        operator, party = self.signatures
        lines.append(f"{operator:<{width - len(party)}}{party}")
        for line in self.footer_lines:
            lines.append(line.upper().center(width).rstrip())
        if self.note:
            lines.append(self.note.center(width).rstrip())
        return "\n".join(lines)


def _text(value) -> str:
    return "" if value is None else str(value)


def render_receipt(receipt: Receipt, config: TemplateConfig) -> ReceiptDocument:
    """Lay out one copy of the receipt.

    The GROSS row carries the gross-out timestamp (``date_time_out``) and the
    TARE row the tare-in timestamp (``date_time_in``).
    """
    info_rows = [
        InfoRow(
            LabeledValue("RST NO", _text(receipt.rst_no)),
            LabeledValue("VEHICLE NO", _text(receipt.vehicle_no).upper()),
        ),
        InfoRow(
            LabeledValue("MATERIAL", _text(receipt.material)),
            LabeledValue("CUSTOMER", _text(receipt.customer)),
        ),
        InfoRow(LabeledValue("SUPPLIER", _text(receipt.supplier))),
    ]

    weight_rows = [
        WeightRow(
            label="GROSS Wt",
            value=format_number(receipt.gross_weight),
            date=format_date(receipt.date_time_out),
            time=format_time(receipt.date_time_out),
        ),
        WeightRow(
            label="TARE Wt",
            value=format_number(receipt.tare_weight),
            date=format_date(receipt.date_time_in),
            time=format_time(receipt.date_time_in),
        ),
        WeightRow(
            label="NET Wt",
            value=format_number(receipt.net_weight),
            words=f"{weight_to_words(receipt.net_weight)} KG",
        ),
    ]

    charges = None
    if config.show_charges:
        charges = ChargesLine("Charges(1):", "Rs.", format_number(receipt.charges))

    remarks = _text(receipt.remarks)

    return ReceiptDocument(
        company_name=_text(config.company_name),
        address_lines=_text(config.address).splitlines(),
        info_rows=info_rows,
        weight_rows=weight_rows,
        charges=charges,
        signatures=(OPERATOR_SIGNATURE, PARTY_SIGNATURE),
        footer_lines=_text(config.footer).splitlines(),
        note=f"Note: {remarks}" if remarks else None,
    )
