"""PDF generation for 3-up receipt pages using ReportLab."""

from __future__ import annotations

import logging
from pathlib import Path

from .models import Receipt, TemplateConfig
from .page import A4_GEOMETRY, PageGeometry, PageLayout, compose_page
from .template import ReceiptDocument

logger = logging.getLogger(__name__)

MM = 72.0 / 25.4  # points per millimetre

# Monospaced (regular, bold) pairs, closest to the Courier look first
_FONT_SEARCH_PATHS = [
    (
        "/usr/share/fonts/truetype/courier-prime/CourierPrime-Regular.ttf",
        "/usr/share/fonts/truetype/courier-prime/CourierPrime-Bold.ttf",
    ),
    (
        "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationMono-Bold.ttf",
    ),
    (
        "/usr/share/fonts/liberation-mono/LiberationMono-Regular.ttf",
        "/usr/share/fonts/liberation-mono/LiberationMono-Bold.ttf",
    ),
    (
        "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSansMono-Bold.ttf",
    ),
    # macOS
    (
        "/Library/Fonts/Courier New.ttf",
        "/Library/Fonts/Courier New Bold.ttf",
    ),
    # Windows
    ("C:/Windows/Fonts/cour.ttf", "C:/Windows/Fonts/courbd.ttf"),
]

_BUILTIN_FONTS = ("Courier", "Courier-Bold")


def _find_fonts(font_path: str = "", bold_font_path: str = "") -> tuple[str, str] | None:
    """Find a regular/bold TrueType pair, preferring the configured one."""
    candidates = list(_FONT_SEARCH_PATHS)
    if font_path:
        candidates.insert(0, (font_path, bold_font_path or font_path))
    for regular, bold in candidates:
        if Path(regular).expanduser().exists() and Path(bold).expanduser().exists():
            return str(Path(regular).expanduser()), str(Path(bold).expanduser())
    return None


def _register_fonts(font_path: str = "", bold_font_path: str = "") -> tuple[str, str]:
    """Register the receipt fonts with ReportLab and return their names.

    Falls back to the built-in Courier faces when no TrueType pair is found.
    """
    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFError, TTFont

    found = _find_fonts(font_path, bold_font_path)
    if found is None:
        logger.debug("No TrueType monospace font found; using built-in Courier")
        return _BUILTIN_FONTS
    regular, bold = found
    try:
        pdfmetrics.registerFont(TTFont("ReceiptMono", regular))
        pdfmetrics.registerFont(TTFont("ReceiptMono-Bold", bold))
    except TTFError as e:
        logger.warning("Cannot load receipt font (%s); using built-in Courier", e)
        return _BUILTIN_FONTS
    return "ReceiptMono", "ReceiptMono-Bold"


def export_filename(receipt: Receipt) -> str:
    """``Receipt_<rstNo>_<vehicleNo>.pdf`` with placeholders for blanks."""
    rst = str(receipt.rst_no or "NoRST")
    vehicle = str(receipt.vehicle_no or "NoVehicle")
    name = f"Receipt_{rst}_{vehicle}.pdf"
    return name.replace("/", "-").replace("\\", "-")


def page_offsets(content_height: float, page_height: float, margin: float) -> list[float]:
    """Top offset of the content image on each PDF page.

    The first page places the content at the margin; further pages are added
    while some of the content is still left to show (remaining height >= 0).
    """
    offsets = [margin]
    height_left = content_height - (page_height - margin)
    while height_left >= 0:
        offsets.append(height_left - content_height + margin)
        height_left -= page_height
    return offsets


def _rule(c, x: float, y: float, width: float, dash=(1.5, 1.5)) -> None:
    c.setDash(*dash)
    c.setLineWidth(0.6)
    c.line(x, y, x + width, y)
    c.setDash()


def _draw_copy(
    c,
    doc: ReceiptDocument,
    x: float,
    top: float,
    width: float,
    height: float,
    fonts: tuple[str, str],
) -> None:
    """Draw one receipt into a box whose top-left corner is (x, top), in points."""
    regular, bold = fonts
    c.saveState()
    clip = c.beginPath()
    clip.rect(x, top - height, width, height)
    c.clipPath(clip, stroke=0, fill=0)

    center = x + width / 2
    y = top - 1 * MM

    # Header
    y -= 5 * MM
    c.setFont(bold, 13)
    c.drawCentredString(center, y, doc.company_name.upper())
    c.setFont(regular, 7.5)
    for line in doc.address_lines:
        y -= 3.2 * MM
        c.drawCentredString(center, y, line.upper())
    y -= 2 * MM

    # Details
    left_label, left_colon, left_value = x + 2 * MM, x + 22 * MM, x + 26 * MM
    right_label, right_colon, right_value = x + 112 * MM, x + 138 * MM, x + 142 * MM
    for i, row in enumerate(doc.info_rows):
        y -= 4.2 * MM
        value_font = bold if i == 0 else regular
        c.setFont(regular, 9.5)
        c.drawString(left_label, y, row.left.label)
        c.drawString(left_colon, y, ":")
        c.setFont(value_font, 9.5)
        c.drawString(left_value, y, row.left.value)
        if row.right is not None:
            c.setFont(regular, 9.5)
            c.drawString(right_label, y, row.right.label)
            c.drawString(right_colon, y, ":")
            c.setFont(value_font, 9.5)
            c.drawString(right_value, y, row.right.value)
    y -= 2.5 * MM

    # Weights
    _rule(c, x + 1 * MM, y, width - 2 * MM)
    for w in doc.weight_rows:
        y -= 4.6 * MM
        c.setFont(regular, 9.5)
        c.drawString(left_label, y, w.label)
        c.drawString(left_colon, y, ":")
        c.setFont(bold, 10.5)
        c.drawRightString(x + 50 * MM, y, w.value)
        c.setFont(regular, 9.5)
        c.drawString(x + 51 * MM, y, w.unit)
        if w.words is not None:
            c.setFont(bold, 9.5)
            c.drawRightString(x + width - 6 * MM, y, w.words)
        else:
            c.drawString(x + 112 * MM, y, "Date:")
            c.drawString(x + 124 * MM, y, w.date or "")
            c.drawString(x + 150 * MM, y, "Time:")
            c.drawString(x + 162 * MM, y, w.time or "")
    y -= 1.8 * MM
    _rule(c, x + 1 * MM, y, width - 2 * MM)

    # Charges
    if doc.charges is not None:
        y -= 4.2 * MM
        c.setFont(regular, 9.5)
        c.drawString(left_label, y, doc.charges.label)
        c.drawString(x + 26 * MM, y, doc.charges.currency)
        c.setFont(bold, 9.5)
        c.drawString(x + 36 * MM, y, doc.charges.value)
        y -= 1.6 * MM
        _rule(c, x + 1 * MM, y, width - 2 * MM)

    # Signatures
    y -= 9 * MM
    operator, party = doc.signatures
    sig_width = 55 * MM
    _rule(c, x + 2 * MM, y + 3.6 * MM, sig_width, dash=(0.6, 1.2))
    _rule(c, x + width - 2 * MM - sig_width, y + 3.6 * MM, sig_width, dash=(0.6, 1.2))
    c.setFont(regular, 8.5)
    c.drawString(x + 2 * MM, y, operator.upper())
    c.drawRightString(x + width - 2 * MM, y, party.upper())

    # Footer
    c.setFont(regular, 8)
    y -= 1 * MM
    for line in doc.footer_lines:
        y -= 3.4 * MM
        c.drawCentredString(center, y, line.upper())
    if doc.note:
        y -= 3.2 * MM
        c.setFont(bold, 7)
        c.drawCentredString(center, y, doc.note)

    c.restoreState()


def write_page_pdf(
    layout: PageLayout,
    output_path: str | Path,
    font_path: str = "",
    bold_font_path: str = "",
) -> Path:
    """Write a composed 3-up page to a PDF file.

    Args:
        layout: The page produced by :func:`compose_page`.
        output_path: Where to save the PDF file.
        font_path: Optional TrueType font to use instead of the search list.
        bold_font_path: Bold companion of ``font_path``.

    Returns:
        Path to the generated PDF file.

    Raises:
        ImportError: If reportlab is not installed.
    """
    try:
        from reportlab.pdfgen import canvas
    except ImportError:
        raise ImportError("reportlab is required: pip install reportlab")

    fonts = _register_fonts(font_path, bold_font_path)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    geometry = layout.geometry
    page_w, page_h = geometry.width * MM, geometry.height * MM
    content_w = geometry.printable_width * MM
    content_h = geometry.printable_height * MM

    c = canvas.Canvas(str(output_path), pagesize=(page_w, page_h))
    c.setTitle(output_path.stem)

    # The 3-up sheet is drawn once as a form and placed on each page
    c.beginForm("three_up", lowerx=0, lowery=0, upperx=content_w, uppery=content_h)
    for slot in layout.slots:
        slot_top = content_h - (slot.top - geometry.margin) * MM
        _draw_copy(c, slot.document, 0, slot_top, content_w, slot.height * MM, fonts)
    c.endForm()

    offsets = page_offsets(content_h, page_h, geometry.margin * MM)
    for offset in offsets:
        c.saveState()
        c.translate(geometry.margin * MM, page_h - offset - content_h)
        c.doForm("three_up")
        c.restoreState()
        c.showPage()
    c.save()

    logger.info("Wrote %d page(s) to %s", len(offsets), output_path)
    return output_path


def write_receipt_pdf(
    receipt: Receipt,
    template: TemplateConfig,
    output_dir: str | Path,
    *,
    geometry: PageGeometry = A4_GEOMETRY,
    font_path: str = "",
    bold_font_path: str = "",
) -> Path:
    """Compose the 3-up page for ``receipt`` and save it under ``output_dir``."""
    layout = compose_page(receipt, template, geometry)
    output_path = Path(output_dir).expanduser() / export_filename(receipt)
    return write_page_pdf(layout, output_path, font_path, bold_font_path)
