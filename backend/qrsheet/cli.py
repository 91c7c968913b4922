"""
命令行入口

示例：
  qrsheet export items.xlsx --sheet Produce --sheet "Q1/Sales" --out ./sheets
  qrsheet print items.xlsx --pdf ./print.pdf
  qrsheet print items.xlsx --printer Office_Laser
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from .adapters import (
    FileSystemSink,
    OpenpyxlSheetReader,
    PdfFilePrintSurface,
    PromptDirectoryPicker,
    QrcodeMarkupProvider,
    StaticDirectoryPicker,
    SystemPrintSurface,
)
from .config import RuntimeConfig, get_config, reload_config, setup_logging
from .interfaces import IPrintSurface, SheetReadError
from .models import BatchReport
from .pipeline import ExportCoordinator, PrintCoordinator
from .render import PageRenderer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="qrsheet",
        description="Turn spreadsheet rows into printable sheets of labeled QR codes.",
    )
    ap.add_argument("--config", help="runtime options YAML")
    ap.add_argument("--log-level", help="override logging.log_level")
    sub = ap.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="save one PNG per page under a directory per sheet")
    export.add_argument("workbook")
    export.add_argument("--sheet", action="append", dest="sheets", help="sheet name (repeatable, default: all)")
    export.add_argument("--out", help="destination root (prompted when omitted)")

    prt = sub.add_parser("print", help="print all sheets as one multi-page document")
    prt.add_argument("workbook")
    prt.add_argument("--sheet", action="append", dest="sheets", help="sheet name (repeatable, default: all)")
    target = prt.add_mutually_exclusive_group()
    target.add_argument("--printer", help="printer name for lp/lpr")
    target.add_argument("--pdf", help="write the print document to this PDF instead")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = reload_config(args.config) if args.config else get_config()
    setup_logging(config.logging, level=args.log_level)

    reader = OpenpyxlSheetReader(config.columns.code, config.columns.label)
    try:
        sheets = reader.load_sheets(Path(args.workbook), args.sheets)
    except SheetReadError as e:
        logger.error(str(e))
        return 1

    renderer = PageRenderer(QrcodeMarkupProvider(), config=config)

    if args.command == "export":
        picker = StaticDirectoryPicker(args.out) if args.out else PromptDirectoryPicker()
        coordinator = ExportCoordinator(renderer, FileSystemSink(), picker, config=config)
        report = asyncio.run(coordinator.export_all(sheets))
    else:
        surface = _print_surface(args, config)
        report = asyncio.run(PrintCoordinator(renderer, surface, config=config).print_all(sheets))

    _print_summary(report)
    return 0


def _print_surface(args: argparse.Namespace, config: RuntimeConfig) -> IPrintSurface:
    if args.pdf:
        return PdfFilePrintSurface(args.pdf)
    return SystemPrintSurface(
        printer=args.printer or config.printing.printer,
        command=config.printing.command,
        timeout=config.timeout_or_none(config.timeouts.print_sec),
    )


def _print_summary(report: BatchReport) -> None:
    print(f"{report.kind.value}: {report.status.value}")
    for path in report.written:
        print(f"  {path}")
    if report.pages_printed:
        print(f"  printed {report.pages_printed}/{report.pages_total} pages")
    for failure in report.failures:
        print(
            f"  FAILED {failure.sheet_directory} page {failure.page_number} "
            f"({failure.stage.value}): {failure.reason}"
        )


if __name__ == "__main__":
    raise SystemExit(main())
