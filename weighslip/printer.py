"""Send 3-up receipt sheets to a CUPS queue with lpr."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .page import A4_GEOMETRY, PageGeometry

_CUPS_HINT = (
    "Check that CUPS is installed:\n"
    "  Ubuntu/Debian: sudo apt install cups\n"
    "  Fedora/RHEL:   sudo dnf install cups"
)

# CUPS names for the sheet sizes we lay out on
_NAMED_MEDIA = {
    (210.0, 297.0): "A4",
    (148.0, 210.0): "A5",
}


@dataclass
class PrinterInfo:
    name: str
    is_default: bool


def media_option(geometry: PageGeometry) -> str:
    """CUPS ``media`` value matching the composed sheet."""
    named = _NAMED_MEDIA.get((float(geometry.width), float(geometry.height)))
    if named:
        return named
    return f"Custom.{geometry.width:g}x{geometry.height:g}mm"


def lpr_command(
    file_path: Path,
    printer_name: str | None = None,
    geometry: PageGeometry = A4_GEOMETRY,
    title: str | None = None,
) -> list[str]:
    """Build the lpr invocation for one receipt sheet.

    Scaling is switched off so the three copy boxes keep their
    millimetre heights and land on the tear lines.
    """
    cmd = ["lpr"]
    if printer_name:
        cmd += ["-P", printer_name]
    if title:
        cmd += ["-T", title]
    cmd += ["-o", f"media={media_option(geometry)}"]
    cmd += ["-o", "print-scaling=none"]
    cmd.append(str(file_path))
    return cmd


def parse_printers(default_output: str, list_output: str) -> list[PrinterInfo]:
    """Read ``lpstat -d`` and ``lpstat -p`` output into PrinterInfo rows."""
    default_name = ""
    # "system default destination: Epson_LQ"
    if ":" in default_output:
        default_name = default_output.strip().split(":")[-1].strip()

    printers = []
    for line in list_output.splitlines():
        # "printer Epson_LQ is idle.  enabled since ..."
        parts = line.split()
        if len(parts) >= 2 and parts[0] == "printer":
            printers.append(PrinterInfo(parts[1], parts[1] == default_name))
    return printers


def _lpstat(flag: str) -> str:
    try:
        result = subprocess.run(
            ["lpstat", flag], capture_output=True, text=True, timeout=10,
        )
    except (subprocess.TimeoutExpired, OSError):
        return ""
    return result.stdout if result.returncode == 0 else ""


class Printer:
    """Print receipt sheets using the system lpr command."""

    @staticmethod
    def list_printers() -> list[PrinterInfo]:
        """List CUPS queues, marking the default one.

        Raises:
            RuntimeError: If lpstat is not available.
        """
        if shutil.which("lpstat") is None:
            raise RuntimeError(f"lpstat command not found. {_CUPS_HINT}")
        return parse_printers(_lpstat("-d"), _lpstat("-p"))

    @staticmethod
    def print_file(
        file_path: str | Path,
        printer_name: str | None = None,
        geometry: PageGeometry = A4_GEOMETRY,
        title: str | None = None,
    ) -> None:
        """Queue a composed sheet on the given (or default) printer.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            RuntimeError: If lpr is not available or printing fails.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        if shutil.which("lpr") is None:
            raise RuntimeError(f"lpr command not found. {_CUPS_HINT}")

        cmd = lpr_command(file_path, printer_name, geometry, title)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=30)
        except subprocess.TimeoutExpired:
            raise RuntimeError("Print job timed out.")
        if result.returncode != 0:
            raise RuntimeError(f"Printing failed: {result.stderr.strip()}")
