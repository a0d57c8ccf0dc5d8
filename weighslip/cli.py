"""CLI entry point for weighslip."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys

from dotenv import load_dotenv

from .app import ReceiptDesk
from .config import DEFAULT_CONFIG_PATH, load_config
from .formatting import format_date, format_number
from .notify import ERROR, Notification, Notifier

# CLI option -> receipt field
_RECEIPT_OPTIONS = {
    "rst": "rst_no",
    "vehicle": "vehicle_no",
    "customer": "customer",
    "supplier": "supplier",
    "material": "material",
    "gross": "gross_weight",
    "tare": "tare_weight",
    "time_in": "date_time_in",
    "time_out": "date_time_out",
    "charges": "charges",
    "remarks": "remarks",
}


def _add_receipt_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--rst", help="RST / reference number")
    parser.add_argument("--vehicle", help="Vehicle number")
    parser.add_argument("--customer", help="Customer")
    parser.add_argument("--supplier", help="Supplier")
    parser.add_argument("--material", help="Material")
    parser.add_argument("--gross", help="Gross weight (kg)")
    parser.add_argument("--tare", help="Tare weight (kg)")
    parser.add_argument(
        "--net", help="Net weight (kg); overrides gross - tare from now on",
    )
    parser.add_argument(
        "--in", dest="time_in", metavar="YYYY-MM-DDTHH:MM",
        help="Date/time of the tare weighing",
    )
    parser.add_argument(
        "--out", dest="time_out", metavar="YYYY-MM-DDTHH:MM",
        help="Date/time of the gross weighing",
    )
    parser.add_argument("--charges", help="Charges (Rs)")
    parser.add_argument("--remarks", help="Remarks")
    parser.add_argument(
        "--pdf", type=str, default=None, metavar="DIR",
        help="Also export the 3-up PDF into DIR",
    )
    parser.add_argument(
        "--print", action="store_true", dest="do_print",
        help="Also print the 3-up page ([printer] enabled = true always prints)",
    )


def _unescape(text: str) -> str:
    return text.replace("\\n", "\n")


def main(argv: list[str] | None = None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="weighslip",
        description="Weighbridge receipts: record weighings and print them 3-up on A4",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=os.environ.get("WEIGHSLIP_CONFIG", DEFAULT_CONFIG_PATH),
        help="Path to the configuration file (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging",
    )

    sub = parser.add_subparsers(dest="command")

    add_parser = sub.add_parser("add", help="Record and save a new receipt")
    _add_receipt_options(add_parser)

    update_parser = sub.add_parser("update", help="Edit a saved receipt")
    update_parser.add_argument("id", type=int)
    _add_receipt_options(update_parser)

    list_parser = sub.add_parser("list", help="List saved receipts")
    list_parser.add_argument("--search", "-s", default="", help="Filter text")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    show_parser = sub.add_parser("show", help="Preview a saved receipt")
    show_parser.add_argument("id", type=int)
    show_parser.add_argument("--json", action="store_true", help="Output as JSON")

    delete_parser = sub.add_parser("delete", help="Delete a saved receipt")
    delete_parser.add_argument("id", type=int)
    delete_parser.add_argument(
        "--yes", "-y", action="store_true", help="Do not ask for confirmation",
    )

    export_parser = sub.add_parser("export", help="Export a receipt as a 3-up PDF")
    export_parser.add_argument("id", type=int)
    export_parser.add_argument(
        "--output", "-o", type=str, default=None, metavar="DIR",
        help="Output directory",
    )

    print_parser = sub.add_parser("print", help="Print a receipt 3-up on A4")
    print_parser.add_argument("id", type=int)
    print_parser.add_argument("--printer", type=str, default=None, help="Printer name")

    sub.add_parser("printers", help="List available printers")

    template_parser = sub.add_parser("template", help="Show or change receipt header/footer")
    template_parser.add_argument("--company", help="Company name")
    template_parser.add_argument("--address", help="Address (use \\n for a new line)")
    template_parser.add_argument("--footer", help="Footer (use \\n for a new line)")
    charges_group = template_parser.add_mutually_exclusive_group()
    charges_group.add_argument(
        "--show-charges", dest="show_charges", action="store_const", const=True,
        help="Print the charges line",
    )
    charges_group.add_argument(
        "--hide-charges", dest="show_charges", action="store_const", const=False,
        help="Leave the charges line out",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    config = load_config(args.config)
    level = logging.DEBUG if args.verbose else config.logging.level
    logging.basicConfig(
        level=level, format="%(levelname)s [%(name)s] %(message)s",
    )

    if args.command == "printers":
        _cmd_printers()
        return

    desk = ReceiptDesk.from_config(config, Notifier(sink=_print_notification))
    try:
        match args.command:
            case "add":
                _cmd_add(desk, args)
            case "update":
                _cmd_update(desk, args)
            case "list":
                _cmd_list(desk, args)
            case "show":
                _cmd_show(desk, args)
            case "delete":
                _cmd_delete(desk, args)
            case "export":
                _cmd_export(desk, args)
            case "print":
                _cmd_print(desk, args)
            case "template":
                _cmd_template(desk, args)
    except KeyError as e:
        print(e.args[0] if e.args else str(e), file=sys.stderr)
        sys.exit(1)
    finally:
        desk.close()


def _print_notification(note: Notification) -> None:
    stream = sys.stderr if note.kind == ERROR else sys.stdout
    print(note.message, file=stream)


def _apply_receipt_options(desk: ReceiptDesk, args) -> None:
    for option, field_name in _RECEIPT_OPTIONS.items():
        value = getattr(args, option)
        if value is not None:
            desk.edit(field_name, value)
    if args.net is not None:
        desk.edit("net_weight", args.net)
    if desk.net_weight_warning:
        print(desk.net_weight_warning, file=sys.stderr)


def _save_and_output(desk: ReceiptDesk, args) -> None:
    stored = desk.save()
    print(f"ID: {stored.id}")
    ok = True
    if args.pdf:
        ok = asyncio.run(desk.export_pdf(args.pdf)) is not None
    if args.do_print or desk.auto_print:
        ok = desk.print_receipt() and ok
    if not ok:
        sys.exit(1)


def _cmd_add(desk: ReceiptDesk, args) -> None:
    desk.new()
    _apply_receipt_options(desk, args)
    _save_and_output(desk, args)


def _cmd_update(desk: ReceiptDesk, args) -> None:
    desk.load(args.id)
    _apply_receipt_options(desk, args)
    _save_and_output(desk, args)


def _cmd_list(desk: ReceiptDesk, args) -> None:
    receipts = desk.search(args.search)
    if args.json:
        print(json.dumps([r.to_dict() for r in receipts], ensure_ascii=False, indent=2))
        return
    if not receipts:
        print("No receipts found")
        return
    for r in receipts:
        head = f"#{r.rst_no or '---'} - {r.vehicle_no or 'No Vehicle'}"
        detail = f"{format_date(r.date_time_out)} • {r.customer}"
        print(f"{r.id}  {head:<32} {detail:<32} {format_number(r.net_weight):>8} kg")


def _cmd_show(desk: ReceiptDesk, args) -> None:
    receipt = desk.load(args.id)
    if args.json:
        print(json.dumps(receipt.to_dict(), ensure_ascii=False, indent=2))
        return
    print(desk.preview())


def _cmd_delete(desk: ReceiptDesk, args) -> None:
    desk.collection.load(args.id)
    action = desk.request_delete(args.id)
    if not args.yes:
        answer = input(f"{action.prompt} [y/N] ").strip().lower()
        if answer not in ("y", "yes"):
            action.cancel()
            print("Cancelled.")
            return
    action.confirm()


def _cmd_export(desk: ReceiptDesk, args) -> None:
    desk.load(args.id)
    path = asyncio.run(desk.export_pdf(args.output))
    if path is None:
        sys.exit(1)
    print(f"PDF saved: {path}")


def _cmd_print(desk: ReceiptDesk, args) -> None:
    desk.load(args.id)
    if not desk.print_receipt(args.printer):
        sys.exit(1)


def _cmd_printers() -> None:
    from .printer import Printer

    try:
        printers = Printer.list_printers()
    except RuntimeError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    if not printers:
        print("No printers found.")
        return
    print(f"Available printers: {len(printers)}")
    for p in printers:
        default_mark = " (default)" if p.is_default else ""
        print(f"  {p.name}{default_mark}")


def _cmd_template(desk: ReceiptDesk, args) -> None:
    changes = {
        "company_name": args.company,
        "address": _unescape(args.address) if args.address is not None else None,
        "footer": _unescape(args.footer) if args.footer is not None else None,
        "show_charges": args.show_charges,
    }
    for name, value in changes.items():
        if value is not None:
            desk.update_template(name, value)

    t = desk.template
    print(f"Company name : {t.company_name}")
    print("Address      : " + t.address.replace("\n", "\n               "))
    print("Footer       : " + t.footer.replace("\n", "\n               "))
    print(f"Show charges : {'yes' if t.show_charges else 'no'}")
