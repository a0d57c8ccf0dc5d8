"""Weighbridge receipt recording and 3-up A4 printing."""

from .app import ReceiptDesk
from .collection import ReceiptCollection
from .config import AppConfig, ExportConfig, PDFConfig, PrinterConfig, load_config
from .db import KeyValueStore
from .formatting import format_date, format_time, weight_to_words
from .models import Receipt, TemplateConfig, new_receipt
from .netweight import apply_edit, compute_net_weight
from .notify import Notifier, PendingAction
from .page import A4_GEOMETRY, PageGeometry, PageLayout, compose_page
from .template import ReceiptDocument, render_receipt

__all__ = [
    "ReceiptDesk",
    "ReceiptCollection",
    "KeyValueStore",
    "Receipt",
    "TemplateConfig",
    "new_receipt",
    "apply_edit",
    "compute_net_weight",
    "weight_to_words",
    "format_date",
    "format_time",
    "ReceiptDocument",
    "render_receipt",
    "PageGeometry",
    "PageLayout",
    "A4_GEOMETRY",
    "compose_page",
    "Notifier",
    "PendingAction",
    "AppConfig",
    "ExportConfig",
    "PDFConfig",
    "PrinterConfig",
    "load_config",
]
