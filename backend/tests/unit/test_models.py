"""
数据模型单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_models.py -v
"""

import pytest
from pydantic import ValidationError

from qrsheet.models import (
    BatchKind,
    BatchReport,
    BatchStatus,
    Bitmap,
    ExportTarget,
    FailureStage,
    Item,
    Page,
    Sheet,
)


class TestItem:
    """记录模型测试"""

    def test_from_row(self):
        """测试按列名取 code/label，其余列透传"""
        item = Item.from_row({"UPC": "0123", "DESCRIPTION": "Apples", "AISLE": 4})
        assert item.code == "0123"
        assert item.label == "Apples"
        assert item.fields == {"AISLE": "4"}

    def test_from_row_integral_float(self):
        """测试整数值浮点（Excel数字单元格）去掉 .0"""
        item = Item.from_row({"UPC": 4011.0, "DESCRIPTION": None})
        assert item.code == "4011"
        assert item.label == ""

    def test_from_row_custom_columns(self):
        item = Item.from_row({"SKU": "X1", "NAME": "Widget"}, code_column="SKU", label_column="NAME")
        assert (item.code, item.label) == ("X1", "Widget")

    def test_missing_columns(self):
        item = Item.from_row({"OTHER": "v"})
        assert item.code == ""
        assert item.label == ""

    def test_frozen(self):
        """测试记录只读"""
        item = Item(code="A", label="B")
        with pytest.raises(ValidationError):
            item.code = "C"


class TestSheetAndPage:
    """工作表与页模型测试"""

    def test_sheet_empty(self):
        assert Sheet(name="x").is_empty
        assert len(Sheet(name="x", items=[Item(code="1")])) == 1

    def test_sheet_directory_name(self):
        assert Sheet(name=" Q1/Sales ").directory_name(0) == "Q1_Sales"
        assert Sheet(name=None).directory_name(4) == "sheet-5"
        assert Sheet(name="   ").directory_name(0) == "sheet-1"

    def test_page_number_one_based(self):
        with pytest.raises(ValidationError):
            Page(page_number=0)

    def test_export_target_filename(self):
        bitmap = Bitmap(width=1056, height=816, png=b"png")
        target = ExportTarget(directory="Produce", page_number=2, bitmap=bitmap)
        assert target.filename == "cheat-sheet-2.png"


class TestBatchReport:
    """批处理报告测试"""

    def test_mark_finished_succeeded(self):
        report = BatchReport(kind=BatchKind.EXPORT)
        report.mark_running()
        report.mark_finished()
        assert report.status == BatchStatus.SUCCEEDED
        assert report.started_at is not None
        assert report.finished_at is not None

    def test_mark_finished_partial(self):
        """测试有失败页时为部分成功"""
        report = BatchReport(kind=BatchKind.EXPORT)
        report.add_failure(0, "Produce", 1, FailureStage.PERSIST, "disk full")
        report.mark_finished()
        assert report.status == BatchStatus.PARTIAL
        assert report.failures[0].page_number == 1
        assert "persist失败:Produce/1" in report.flags

    def test_mark_cancelled(self):
        report = BatchReport(kind=BatchKind.PRINT)
        report.mark_cancelled("未选择导出目录")
        assert report.status == BatchStatus.CANCELLED
        assert report.flags == ["未选择导出目录"]

    def test_add_flag_dedupe(self):
        report = BatchReport(kind=BatchKind.EXPORT)
        report.add_flag("目录名冲突:a")
        report.add_flag("目录名冲突:a")
        assert report.flags == ["目录名冲突:a"]
