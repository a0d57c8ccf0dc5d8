"""Application shell: the receipt being edited, saved history, export and print."""

from __future__ import annotations

import asyncio
import logging
import tempfile
from dataclasses import replace
from pathlib import Path

from .collection import ReceiptCollection
from .config import AppConfig
from .db import KeyValueStore
from .models import Receipt, TemplateConfig, new_receipt
from .netweight import apply_edit, refresh_net_weight
from .notify import Notifier, PendingAction
from .page import PageLayout, compose_page
from .pdf import write_page_pdf, write_receipt_pdf
from .printer import Printer
from .settings import load_template_config, update_template_config
from .template import render_receipt

logger = logging.getLogger(__name__)


class ReceiptDesk:
    """Owns the current receipt, the saved collection and template settings.

    All operations are plain synchronous calls except :meth:`export_pdf`,
    which switches to the 3-up print layout, waits for it to settle, writes
    the file off the event loop and always switches back.
    """

    def __init__(
        self,
        store: KeyValueStore,
        config: AppConfig | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._store = store
        self._config = config or AppConfig()
        self.notifier = notifier or Notifier()
        self.collection = ReceiptCollection(store, self.notifier)
        self.template: TemplateConfig = load_template_config(store)
        self.current: Receipt = new_receipt(self.collection.next_id())
        self.print_mode = False
        self._export_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: AppConfig, notifier: Notifier | None = None) -> ReceiptDesk:
        return cls(KeyValueStore(config.storage.db_path), config, notifier)

    def close(self) -> None:
        self._store.close()

    @property
    def auto_print(self) -> bool:
        """Whether saved receipts go straight to the printer."""
        return self._config.printer.enabled

    # -- editing -----------------------------------------------------------

    def new(self) -> Receipt:
        self.current = refresh_net_weight(new_receipt(self.collection.next_id()))
        return self.current

    def load(self, receipt_id: int) -> Receipt:
        self.current = refresh_net_weight(self.collection.load(receipt_id))
        return self.current

    def edit(self, name: str, value) -> Receipt:
        self.current = apply_edit(self.current, name, value)
        return self.current

    @property
    def net_weight_warning(self) -> str | None:
        if self.current.has_negative_net:
            return "Warning: Net weight is negative"
        return None

    # -- history -----------------------------------------------------------

    def save(self) -> Receipt:
        stored = self.collection.save(self.current)
        self.current = replace(self.current, id=stored.id)
        return stored

    def request_delete(self, receipt_id: int) -> PendingAction:
        return self.collection.request_delete(receipt_id)

    def search(self, query: str) -> list[Receipt]:
        return self.collection.search(query)

    # -- template ----------------------------------------------------------

    def update_template(self, name: str, value) -> TemplateConfig:
        self.template = update_template_config(self._store, self.template, name, value)
        return self.template

    # -- rendering ---------------------------------------------------------

    def preview(self, width: int = 78) -> str:
        return render_receipt(self.current, self.template).to_text(width)

    def page(self) -> PageLayout:
        return compose_page(self.current, self.template)

    async def export_pdf(self, output_dir: str | Path | None = None) -> Path | None:
        """Export the current receipt as a 3-up PDF.

        Only one export runs at a time; a second request waits for the first.

        Returns:
            Path of the written file, or None if the export failed (the
            failure is reported through the notifier).
        """
        if output_dir is None:
            output_dir = self._config.export.output_dir

        async with self._export_lock:
            self.print_mode = True
            try:
                await asyncio.sleep(self._config.export.settle_delay)
                path = await asyncio.to_thread(
                    write_receipt_pdf,
                    replace(self.current),
                    replace(self.template),
                    output_dir,
                    font_path=self._config.pdf.font_path,
                    bold_font_path=self._config.pdf.bold_font_path,
                )
            except Exception as e:
                logger.exception("PDF export failed")
                self.notifier.error(f"Failed to generate PDF: {str(e) or 'Unknown error'}")
                return None
            finally:
                self.print_mode = False

        self.notifier.success("Receipt downloaded as PDF!")
        return path

    def print_receipt(self, printer_name: str | None = None) -> bool:
        """Send the 3-up page of the current receipt to a printer.

        Returns:
            True if the print job was accepted.
        """
        if printer_name is None:
            printer_name = self._config.printer.printer_name or None

        layout = self.page()
        title = f"Receipt {self.current.rst_no or self.current.id}"
        self.print_mode = True
        with tempfile.TemporaryDirectory(prefix="weighslip_") as tmp_dir:
            pdf_path = Path(tmp_dir) / "receipt.pdf"
            try:
                write_page_pdf(
                    layout,
                    pdf_path,
                    self._config.pdf.font_path,
                    self._config.pdf.bold_font_path,
                )
                Printer.print_file(
                    pdf_path,
                    printer_name=printer_name,
                    geometry=layout.geometry,
                    title=title,
                )
            except Exception as e:
                logger.exception("Printing failed")
                self.notifier.error(f"Print failed: {str(e) or type(e).__name__}")
                return False
            finally:
                self.print_mode = False

        target = printer_name or "default printer"
        self.notifier.success(f"Print job sent to {target}")
        return True
