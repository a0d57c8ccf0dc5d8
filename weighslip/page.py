"""3-up page composition: three identical receipts on one A4 sheet."""

from __future__ import annotations

from dataclasses import dataclass

from .models import Receipt, TemplateConfig
from .template import ReceiptDocument, render_receipt

COPIES_PER_PAGE = 3


@dataclass(frozen=True)
class PageGeometry:
    """Page size and spacing in millimetres."""

    width: float = 210.0
    height: float = 297.0
    margin: float = 3.0
    gap: float = 4.0

    @property
    def printable_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def printable_height(self) -> float:
        return self.height - 2 * self.margin

    @property
    def copy_height(self) -> float:
        gaps = (COPIES_PER_PAGE - 1) * self.gap
        return (self.printable_height - gaps) / COPIES_PER_PAGE


A4_GEOMETRY = PageGeometry()


@dataclass
class CopySlot:
    index: int
    top: float     # mm from the top edge of the page
    height: float
    document: ReceiptDocument

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass
class PageLayout:
    geometry: PageGeometry
    slots: list[CopySlot]


def compose_page(
    receipt: Receipt,
    config: TemplateConfig,
    geometry: PageGeometry = A4_GEOMETRY,
) -> PageLayout:
    """Stack three copies of the receipt with fixed-height boxes.

    Each box is exactly ``geometry.copy_height`` tall, whatever the content,
    so three boxes and two gaps fill the printable height.
    """
    document = render_receipt(receipt, config)
    height = geometry.copy_height
    slots = [
        CopySlot(
            index=i,
            top=geometry.margin + i * (height + geometry.gap),
            height=height,
            document=document,
        )
        for i in range(COPIES_PER_PAGE)
    ]
    return PageLayout(geometry=geometry, slots=slots)
