"""Tests for printer module."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from weighslip.page import PageGeometry
from weighslip.printer import Printer, lpr_command, media_option, parse_printers


class TestListPrinters:
    def test_list_printers_no_lpstat(self):
        """Raises RuntimeError when lpstat is not available."""
        with patch("shutil.which", return_value=None):
            with pytest.raises(RuntimeError, match="lpstat"):
                Printer.list_printers()

    def test_list_printers_with_printers(self):
        """Returns list of printers from lpstat output."""
        with patch("shutil.which", return_value="/usr/bin/lpstat"):
            default_result = MagicMock()
            default_result.returncode = 0
            default_result.stdout = "system default destination: Epson_LQ\n"

            list_result = MagicMock()
            list_result.returncode = 0
            list_result.stdout = (
                "printer Epson_LQ is idle.\n"
                "printer Office_Laser disabled since ...\n"
            )

            with patch(
                "subprocess.run",
                side_effect=[default_result, list_result],
            ):
                printers = Printer.list_printers()

        assert [p.name for p in printers] == ["Epson_LQ", "Office_Laser"]
        assert printers[0].is_default is True
        assert printers[1].is_default is False

    def test_list_printers_lpstat_timeout(self):
        """A hanging lpstat yields an empty list rather than an error."""
        with patch("shutil.which", return_value="/usr/bin/lpstat"):
            with patch(
                "subprocess.run",
                side_effect=subprocess.TimeoutExpired(cmd="lpstat", timeout=10),
            ):
                assert Printer.list_printers() == []


class TestPrintFile:
    def test_print_file_not_found(self):
        """Raises FileNotFoundError for nonexistent file."""
        with pytest.raises(FileNotFoundError, match="File not found"):
            Printer.print_file("/nonexistent/file.pdf")

    def test_print_file_no_lpr(self, tmp_path):
        """Raises RuntimeError when lpr is not available."""
        pdf_file = tmp_path / "test.pdf"
        pdf_file.write_text("dummy")

        with patch("shutil.which", return_value=None):
            with pytest.raises(RuntimeError, match="lpr"):
                Printer.print_file(pdf_file)

    def test_print_file_default_printer(self, tmp_path):
        """Prints A4 to the default printer when no printer_name given."""
        pdf_file = tmp_path / "test.pdf"
        pdf_file.write_text("dummy")

        result = MagicMock()
        result.returncode = 0

        with patch("shutil.which", return_value="/usr/bin/lpr"):
            with patch("subprocess.run", return_value=result) as mock_run:
                Printer.print_file(pdf_file)

        mock_run.assert_called_once()
        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "lpr"
        assert "-P" not in cmd
        assert "-T" not in cmd
        assert "media=A4" in cmd
        assert "print-scaling=none" in cmd
        assert cmd[-1] == str(pdf_file)

    def test_print_file_named_printer_and_title(self, tmp_path):
        """Passes printer name and job title to lpr."""
        pdf_file = tmp_path / "test.pdf"
        pdf_file.write_text("dummy")

        result = MagicMock()
        result.returncode = 0

        with patch("shutil.which", return_value="/usr/bin/lpr"):
            with patch("subprocess.run", return_value=result) as mock_run:
                Printer.print_file(pdf_file, printer_name="Epson_LQ", title="Receipt 14877")

        cmd = mock_run.call_args[0][0]
        assert cmd[cmd.index("-P") + 1] == "Epson_LQ"
        assert cmd[cmd.index("-T") + 1] == "Receipt 14877"

    def test_print_file_failure(self, tmp_path):
        """Raises RuntimeError when lpr returns error."""
        pdf_file = tmp_path / "test.pdf"
        pdf_file.write_text("dummy")

        result = MagicMock()
        result.returncode = 1
        result.stderr = "No printer found"

        with patch("shutil.which", return_value="/usr/bin/lpr"):
            with patch("subprocess.run", return_value=result):
                with pytest.raises(RuntimeError, match="Printing failed"):
                    Printer.print_file(pdf_file)

    def test_print_file_timeout(self, tmp_path):
        """Raises RuntimeError on timeout."""
        pdf_file = tmp_path / "test.pdf"
        pdf_file.write_text("dummy")

        with patch("shutil.which", return_value="/usr/bin/lpr"):
            with patch(
                "subprocess.run",
                side_effect=subprocess.TimeoutExpired(cmd="lpr", timeout=30),
            ):
                with pytest.raises(RuntimeError, match="timed out"):
                    Printer.print_file(pdf_file)


class TestLprOptions:
    def test_media_for_named_sizes(self):
        assert media_option(PageGeometry()) == "A4"
        assert media_option(PageGeometry(width=148, height=210)) == "A5"

    def test_media_for_custom_sheet(self):
        assert media_option(PageGeometry(width=216, height=330)) == "Custom.216x330mm"

    def test_lpr_command_uses_sheet_size(self, tmp_path):
        cmd = lpr_command(tmp_path / "r.pdf", geometry=PageGeometry(width=216, height=330))
        assert cmd[cmd.index("media=Custom.216x330mm") - 1] == "-o"
        assert cmd[-1] == str(tmp_path / "r.pdf")

    def test_parse_printers_without_default(self):
        printers = parse_printers("", "printer Epson_LQ is idle.\nnot a printer line\n")
        assert [(p.name, p.is_default) for p in printers] == [("Epson_LQ", False)]
