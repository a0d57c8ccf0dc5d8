"""Tests for the weighslip command line."""

import json
from unittest.mock import patch

import pytest

from weighslip.cli import main


@pytest.fixture(autouse=True)
def isolated_db(tmp_path, monkeypatch):
    monkeypatch.setenv("WEIGHSLIP_DB_PATH", str(tmp_path / "cli.db"))
    monkeypatch.delenv("WEIGHSLIP_PRINTER", raising=False)
    monkeypatch.delenv("WEIGHSLIP_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)


def _run(capsys, *argv):
    main(["--config", "/nonexistent/config.toml", *argv])
    return capsys.readouterr()


def _add(capsys, *argv) -> int:
    out = _run(capsys, "add", *argv).out
    line = next(l for l in out.splitlines() if l.startswith("ID: "))
    return int(line.split()[1])


def test_no_command_shows_help():
    with pytest.raises(SystemExit) as exc:
        main(["--config", "/nonexistent/config.toml"])
    assert exc.value.code == 1


def test_add_and_list(capsys):
    _add(capsys, "--rst", "14877", "--vehicle", "MH17CV3329",
         "--customer", "RAHATA", "--gross", "22235", "--tare", "7795")
    out = _run(capsys, "list").out
    assert "#14877 - MH17CV3329" in out
    assert "14440 kg" in out


def test_add_reports_save(capsys):
    out = _run(capsys, "add", "--rst", "1").out
    assert "Receipt Saved!" in out


def test_add_with_manual_net(capsys):
    receipt_id = _add(capsys, "--gross", "1000", "--tare", "100", "--net", "850")
    data = json.loads(_run(capsys, "show", str(receipt_id), "--json").out)
    assert data["netWeight"] == 850
    assert data["manualNetWeight"] is True


def test_negative_net_warning(capsys):
    err = _run(capsys, "add", "--gross", "10", "--tare", "20").err
    assert "Net weight is negative" in err


def test_update_keeps_position(capsys):
    first = _add(capsys, "--rst", "1", "--customer", "A")
    _add(capsys, "--rst", "2", "--customer", "B")
    _run(capsys, "update", str(first), "--customer", "C")
    data = json.loads(_run(capsys, "list", "--json").out)
    assert [r["rstNo"] for r in data] == ["2", "1"]
    assert data[1]["customer"] == "C"


def test_list_search(capsys):
    _add(capsys, "--rst", "1", "--vehicle", "MH17")
    _add(capsys, "--rst", "2", "--vehicle", "KA01")
    data = json.loads(_run(capsys, "list", "--search", "ka", "--json").out)
    assert [r["rstNo"] for r in data] == ["2"]
    assert "No receipts found" in _run(capsys, "list", "--search", "zzz").out


def test_show_preview(capsys):
    receipt_id = _add(capsys, "--rst", "14877", "--gross", "14440")
    out = _run(capsys, "show", str(receipt_id)).out
    assert "RST NO" in out
    assert "ONE FOUR FOUR FOUR ZERO KG" in out


def test_show_unknown_id(capsys):
    with pytest.raises(SystemExit) as exc:
        _run(capsys, "show", "42")
    assert exc.value.code == 1
    assert "No saved receipt" in capsys.readouterr().err


def test_delete_with_yes(capsys):
    receipt_id = _add(capsys, "--rst", "1")
    out = _run(capsys, "delete", str(receipt_id), "--yes").out
    assert "Receipt deleted." in out
    assert json.loads(_run(capsys, "list", "--json").out) == []


def test_delete_cancelled(capsys, monkeypatch):
    receipt_id = _add(capsys, "--rst", "1")
    monkeypatch.setattr("builtins.input", lambda prompt: "n")
    out = _run(capsys, "delete", str(receipt_id)).out
    assert "Cancelled." in out
    assert len(json.loads(_run(capsys, "list", "--json").out)) == 1


def test_delete_confirmed_interactively(capsys, monkeypatch):
    receipt_id = _add(capsys, "--rst", "1")
    prompts = []
    monkeypatch.setattr("builtins.input", lambda prompt: prompts.append(prompt) or "y")
    _run(capsys, "delete", str(receipt_id))
    assert "cannot be undone" in prompts[0]
    assert json.loads(_run(capsys, "list", "--json").out) == []


def test_template_update(capsys):
    out = _run(
        capsys, "template", "--company", "ACME", "--address", "LINE ONE\\nLINE TWO",
        "--hide-charges",
    ).out
    assert "Company name : ACME" in out
    assert "Show charges : no" in out

    receipt_id = _add(capsys, "--rst", "1")
    preview = _run(capsys, "show", str(receipt_id)).out
    assert "LINE ONE" in preview and "LINE TWO" in preview
    assert "Charges" not in preview


def test_export(capsys, tmp_path):
    receipt_id = _add(capsys, "--rst", "7", "--vehicle", "MH17")
    target = tmp_path / "Receipt_7_MH17.pdf"
    with patch("weighslip.app.write_receipt_pdf", return_value=target) as mock_write:
        out = _run(capsys, "export", str(receipt_id), "--output", str(tmp_path)).out
    assert f"PDF saved: {target}" in out
    assert mock_write.call_args[0][0].rst_no == "7"


def test_export_failure_exits(capsys):
    receipt_id = _add(capsys, "--rst", "7")
    with patch("weighslip.app.write_receipt_pdf", side_effect=OSError("read-only")):
        with pytest.raises(SystemExit) as exc:
            _run(capsys, "export", str(receipt_id))
    assert exc.value.code == 1
    assert "Failed to generate PDF: read-only" in capsys.readouterr().err


def test_printers_without_cups(capsys):
    with patch("shutil.which", return_value=None):
        with pytest.raises(SystemExit):
            _run(capsys, "printers")
    assert "lpstat" in capsys.readouterr().err


def test_add_with_failed_pdf_exits_nonzero(capsys, tmp_path):
    with patch("weighslip.app.write_receipt_pdf", side_effect=RuntimeError("disk full")):
        with pytest.raises(SystemExit) as exc:
            _run(capsys, "add", "--rst", "1", "--pdf", str(tmp_path / "out"))
    assert exc.value.code == 1
    assert "Failed to generate PDF: disk full" in capsys.readouterr().err


def test_add_with_failed_print_exits_nonzero(capsys):
    with patch("weighslip.app.write_page_pdf"), patch(
        "weighslip.app.Printer.print_file",
        side_effect=RuntimeError("lpr command not found."),
    ):
        with pytest.raises(SystemExit) as exc:
            _run(capsys, "add", "--rst", "1", "--print")
    assert exc.value.code == 1


def test_printer_enabled_prints_on_save(capsys, tmp_path):
    config_path = tmp_path / "config.toml"
    config_path.write_text('[printer]\nenabled = true\nprinter_name = "Epson_LQ"\n')
    with patch("weighslip.app.write_page_pdf"), patch(
        "weighslip.app.Printer.print_file"
    ) as mock_print:
        main(["--config", str(config_path), "add", "--rst", "7"])
    assert mock_print.call_args.kwargs["printer_name"] == "Epson_LQ"
    assert "Print job sent to Epson_LQ" in capsys.readouterr().out


def test_printer_disabled_does_not_print(capsys):
    with patch("weighslip.app.Printer.print_file") as mock_print:
        _run(capsys, "add", "--rst", "7")
    mock_print.assert_not_called()
