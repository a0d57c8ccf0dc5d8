"""TOML configuration loader for weighslip."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

DEFAULT_CONFIG_PATH = "~/.config/weighslip/config.toml"


@dataclass
class StorageConfig:
    db_path: str = "~/.config/weighslip/weighslip.db"


@dataclass
class ExportConfig:
    output_dir: str = "."
    settle_delay: float = 0.05  # seconds to let the 3-up layout settle


@dataclass
class PrinterConfig:
    enabled: bool = False
    printer_name: str = ""


@dataclass
class PDFConfig:
    font_path: str = ""
    bold_font_path: str = ""


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class AppConfig:
    storage: StorageConfig = field(default_factory=StorageConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    printer: PrinterConfig = field(default_factory=PrinterConfig)
    pdf: PDFConfig = field(default_factory=PDFConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The database path, log level and printer name can be overridden via
    environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path).expanduser()
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    sto = raw.get("storage", {})
    exp = raw.get("export", {})
    prn = raw.get("printer", {})
    pdf = raw.get("pdf", {})
    log = raw.get("logging", {})

    # Environment variables win over the file
    db_path = os.environ.get("WEIGHSLIP_DB_PATH", "") or sto.get(
        "db_path", "~/.config/weighslip/weighslip.db"
    )
    log_level = os.environ.get("WEIGHSLIP_LOG_LEVEL", "") or log.get(
        "level", "WARNING"
    )
    printer_name = os.environ.get("WEIGHSLIP_PRINTER", "") or prn.get(
        "printer_name", ""
    )

    return AppConfig(
        storage=StorageConfig(db_path=db_path),
        export=ExportConfig(
            output_dir=exp.get("output_dir", "."),
            settle_delay=float(exp.get("settle_delay", 0.05)),
        ),
        printer=PrinterConfig(
            enabled=prn.get("enabled", False),
            printer_name=printer_name,
        ),
        pdf=PDFConfig(
            font_path=pdf.get("font_path", ""),
            bold_font_path=pdf.get("bold_font_path", ""),
        ),
        logging=LoggingConfig(level=str(log_level).upper()),
    )
