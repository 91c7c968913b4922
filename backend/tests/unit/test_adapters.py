"""
适配器单元测试（表格读取 / 二维码 / 目录选择 / 持久化 / 系统打印）

每个模块完成后必须运行：pytest backend/tests/unit/test_adapters.py -v
"""

import asyncio
import base64
import subprocess
from pathlib import Path

import pytest
from openpyxl import Workbook

from conftest import FakeRasterizer
from qrsheet.adapters import (
    FileSystemSink,
    OpenpyxlSheetReader,
    PromptDirectoryPicker,
    QrcodeMarkupProvider,
    StaticDirectoryPicker,
    SystemPrintSurface,
)
from qrsheet.interfaces import PersistenceError, PrintSurfaceUnavailable, SheetReadError
from qrsheet.models import PageDocument, PrintDocument


@pytest.fixture
def workbook_path(tmp_path) -> Path:
    """两个工作表的测试工作簿"""
    wb = Workbook()
    ws = wb.active
    ws.title = "Produce"
    ws.append(["UPC", "DESCRIPTION", "PRICE"])
    ws.append([4011, "Bananas", 0.59])
    ws.append([None, None, None])
    ws.append(["4131", "Gala Apples", 1.0])

    other = wb.create_sheet("Empty")
    other.append(["UPC", "DESCRIPTION"])

    path = tmp_path / "items.xlsx"
    wb.save(path)
    return path


class TestOpenpyxlSheetReader:
    """表格读取测试"""

    def test_list_sheet_names(self, workbook_path):
        assert OpenpyxlSheetReader().list_sheet_names(workbook_path) == ["Produce", "Empty"]

    def test_read_sheet_skips_blank_rows(self, workbook_path):
        items = OpenpyxlSheetReader().read_sheet(workbook_path, "Produce")

        assert [(i.code, i.label) for i in items] == [("4011", "Bananas"), ("4131", "Gala Apples")]
        assert items[0].fields == {"PRICE": "0.59"}
        assert items[1].fields == {"PRICE": "1"}

    def test_missing_sheet_returns_empty(self, workbook_path):
        assert OpenpyxlSheetReader().read_sheet(workbook_path, "Nope") == []

    def test_load_sheets(self, workbook_path):
        sheets = OpenpyxlSheetReader().load_sheets(workbook_path)

        assert [s.name for s in sheets] == ["Produce", "Empty"]
        assert len(sheets[0]) == 2
        assert sheets[1].is_empty

    def test_custom_columns(self, tmp_path):
        wb = Workbook()
        wb.active.append(["SKU", "NAME"])
        wb.active.append(["A-1", "Widget"])
        path = tmp_path / "custom.xlsx"
        wb.save(path)

        items = OpenpyxlSheetReader(code_column="SKU", label_column="NAME").read_sheet(
            path, wb.active.title
        )
        assert [(i.code, i.label) for i in items] == [("A-1", "Widget")]

    def test_unreadable_workbook(self, tmp_path):
        bad = tmp_path / "broken.xlsx"
        bad.write_text("not a workbook")
        with pytest.raises(SheetReadError):
            OpenpyxlSheetReader().list_sheet_names(bad)
        assert OpenpyxlSheetReader().read_sheet(bad, "Sheet") == []


class TestQrcodeMarkupProvider:
    """二维码标记测试"""

    def test_returns_svg(self):
        markup = asyncio.run(QrcodeMarkupProvider().get_markup("012345678905"))
        assert "<svg" in markup
        assert "path" in markup

    def test_encode_failure_returns_empty(self, monkeypatch):
        provider = QrcodeMarkupProvider()

        def boom(code):
            raise ValueError("data too long")

        monkeypatch.setattr(provider, "_encode", boom)
        assert asyncio.run(provider.get_markup("x")) == ""


class TestDirectoryPickers:
    """目录选择测试"""

    def test_static(self, tmp_path):
        assert asyncio.run(StaticDirectoryPicker(tmp_path).choose_directory()) == tmp_path
        assert asyncio.run(StaticDirectoryPicker(None).choose_directory()) is None

    def test_prompt_answer(self, tmp_path):
        picker = PromptDirectoryPicker(input_func=lambda prompt: f"  {tmp_path}  ")
        assert asyncio.run(picker.choose_directory()) == tmp_path

    def test_prompt_blank_is_cancel(self):
        picker = PromptDirectoryPicker(input_func=lambda prompt: "   ")
        assert asyncio.run(picker.choose_directory()) is None

    def test_prompt_eof_is_cancel(self):
        def eof(prompt):
            raise EOFError

        assert asyncio.run(PromptDirectoryPicker(input_func=eof).choose_directory()) is None


class TestFileSystemSink:
    """文件系统持久化测试"""

    def test_creates_nested_directories(self, tmp_path):
        path = asyncio.run(FileSystemSink().write_image(tmp_path / "a" / "b", "cheat-sheet-1.png", b"png"))

        assert path == tmp_path / "a" / "b" / "cheat-sheet-1.png"
        assert path.read_bytes() == b"png"

    def test_data_url_payload(self, tmp_path):
        payload = "data:image/png;base64," + base64.b64encode(b"\x89PNG data").decode()
        path = asyncio.run(FileSystemSink().write_image(tmp_path, "x.png", payload))
        assert path.read_bytes() == b"\x89PNG data"

    def test_bad_base64(self, tmp_path):
        with pytest.raises(PersistenceError):
            asyncio.run(FileSystemSink().write_image(tmp_path, "x.png", "data:image/png;base64,@@@"))

    def test_directory_is_a_file(self, tmp_path):
        blocker = tmp_path / "Produce"
        blocker.write_text("in the way")
        with pytest.raises(PersistenceError):
            asyncio.run(FileSystemSink().write_image(blocker, "cheat-sheet-1.png", b"png"))


def _document() -> PrintDocument:
    page = PageDocument(svg="<svg/>", width=1056, height=816, markups=("",))
    return PrintDocument(pages=[page])


class TestSystemPrintSurface:
    """系统打印测试"""

    def test_no_spooler(self, monkeypatch):
        monkeypatch.setattr("qrsheet.adapters.print_surface.shutil.which", lambda name: None)
        with pytest.raises(PrintSurfaceUnavailable):
            asyncio.run(SystemPrintSurface(rasterizer=FakeRasterizer()).acquire())

    def test_spools_with_lp(self, monkeypatch):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append((cmd, Path(cmd[-1]).read_bytes()))
            return subprocess.CompletedProcess(cmd, 0)

        monkeypatch.setattr(
            "qrsheet.adapters.print_surface.shutil.which",
            lambda name: "/usr/bin/lp" if name == "lp" else None,
        )
        monkeypatch.setattr("qrsheet.adapters.print_surface.subprocess.run", fake_run)

        surface = SystemPrintSurface(printer="Office", rasterizer=FakeRasterizer())

        async def scenario():
            await surface.acquire()
            spool = surface._spool_file
            await surface.present(_document())
            await surface.release()
            return spool

        spool = asyncio.run(scenario())

        cmd, content = calls[0]
        assert cmd == ["/usr/bin/lp", "-d", "Office", str(spool)]
        assert content == b"%PDF-1.4 fake"
        assert not spool.exists()

    def test_lpr_fallback(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            "qrsheet.adapters.print_surface.shutil.which",
            lambda name: "/usr/bin/lpr" if name == "lpr" else None,
        )
        monkeypatch.setattr(
            "qrsheet.adapters.print_surface.subprocess.run",
            lambda cmd, **kwargs: calls.append(cmd) or subprocess.CompletedProcess(cmd, 0),
        )
        surface = SystemPrintSurface(printer="Office", rasterizer=FakeRasterizer())

        async def scenario():
            await surface.acquire()
            try:
                await surface.present(_document())
            finally:
                await surface.release()

        asyncio.run(scenario())
        assert calls[0][:3] == ["/usr/bin/lpr", "-P", "Office"]

    def test_spooler_failure(self, monkeypatch):
        def failing_run(cmd, **kwargs):
            raise subprocess.CalledProcessError(1, cmd, stderr=b"no such printer")

        monkeypatch.setattr("qrsheet.adapters.print_surface.shutil.which", lambda name: "/usr/bin/lp")
        monkeypatch.setattr("qrsheet.adapters.print_surface.subprocess.run", failing_run)
        surface = SystemPrintSurface(rasterizer=FakeRasterizer())

        async def scenario():
            await surface.acquire()
            try:
                await surface.present(_document())
            finally:
                await surface.release()

        with pytest.raises(PrintSurfaceUnavailable):
            asyncio.run(scenario())
