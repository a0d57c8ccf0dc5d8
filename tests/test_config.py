"""Tests for weighslip config loading."""

import os
import tempfile

import pytest

from weighslip.config import AppConfig, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("WEIGHSLIP_DB_PATH", "WEIGHSLIP_LOG_LEVEL", "WEIGHSLIP_PRINTER"):
        monkeypatch.delenv(name, raising=False)


def test_load_config_defaults():
    """Loading with no path returns all defaults."""
    config = load_config()
    assert isinstance(config, AppConfig)
    assert config.storage.db_path == "~/.config/weighslip/weighslip.db"
    assert config.export.output_dir == "."
    assert config.export.settle_delay == 0.05
    assert config.printer.enabled is False
    assert config.printer.printer_name == ""
    assert config.pdf.font_path == ""
    assert config.logging.level == "WARNING"


def test_load_config_nonexistent_file():
    """Loading a nonexistent file returns defaults."""
    config = load_config("/nonexistent/path.toml")
    assert config.export.output_dir == "."


def test_load_config_from_toml():
    """Loading a valid TOML file populates config."""
    toml_content = b"""\
[storage]
db_path = "/var/lib/weighslip/data.db"

[export]
output_dir = "/srv/receipts"
settle_delay = 0.2

[printer]
enabled = true
printer_name = "Brother_HL"

[pdf]
font_path = "/fonts/mono.ttf"
bold_font_path = "/fonts/mono-bold.ttf"

[logging]
level = "debug"
"""
    with tempfile.NamedTemporaryFile(suffix=".toml", delete=False) as f:
        f.write(toml_content)
        f.flush()
        config = load_config(f.name)

    os.unlink(f.name)

    assert config.storage.db_path == "/var/lib/weighslip/data.db"
    assert config.export.output_dir == "/srv/receipts"
    assert config.export.settle_delay == 0.2
    assert config.printer.enabled is True
    assert config.printer.printer_name == "Brother_HL"
    assert config.pdf.font_path == "/fonts/mono.ttf"
    assert config.pdf.bold_font_path == "/fonts/mono-bold.ttf"
    assert config.logging.level == "DEBUG"


def test_load_config_partial_toml(tmp_path):
    """Partial TOML uses defaults for missing sections."""
    path = tmp_path / "config.toml"
    path.write_text('[printer]\nprinter_name = "HP"\n')
    config = load_config(path)
    assert config.printer.printer_name == "HP"
    assert config.export.output_dir == "."
    assert config.storage.db_path == "~/.config/weighslip/weighslip.db"


def test_load_config_env_override(monkeypatch, tmp_path):
    """Environment variables override the file."""
    path = tmp_path / "config.toml"
    path.write_text('[storage]\ndb_path = "/from/file.db"\n')
    monkeypatch.setenv("WEIGHSLIP_DB_PATH", "/from/env.db")
    monkeypatch.setenv("WEIGHSLIP_LOG_LEVEL", "info")
    monkeypatch.setenv("WEIGHSLIP_PRINTER", "Office")

    config = load_config(path)
    assert config.storage.db_path == "/from/env.db"
    assert config.logging.level == "INFO"
    assert config.printer.printer_name == "Office"
