"""
表格读取器 - 基于 openpyxl 读取 .xlsx 工作簿

职责：
1. 列出工作表名称（保持工作簿顺序）
2. 首行作为表头，其余行转为 Item（空行跳过）
3. 读取单个工作表失败时返回空列表

依赖：
- openpyxl: Excel读取（只读模式 + 取缓存值）
"""

from __future__ import annotations

import logging
from pathlib import Path

from openpyxl import load_workbook

from ..interfaces import ISheetReader, SheetReadError
from ..models import DEFAULT_CODE_COLUMN, DEFAULT_LABEL_COLUMN, Item

logger = logging.getLogger(__name__)


class OpenpyxlSheetReader(ISheetReader):
    """openpyxl 实现"""

    def __init__(
        self,
        code_column: str = DEFAULT_CODE_COLUMN,
        label_column: str = DEFAULT_LABEL_COLUMN,
    ):
        self.code_column = code_column
        self.label_column = label_column

    def list_sheet_names(self, path: Path) -> list[str]:
        try:
            wb = load_workbook(path, read_only=True, data_only=True)
        except Exception as e:
            raise SheetReadError(f"工作簿无法打开: {path}: {e}") from e
        try:
            return list(wb.sheetnames)
        finally:
            wb.close()

    def read_sheet(self, path: Path, sheet_name: str) -> list[Item]:
        try:
            wb = load_workbook(path, read_only=True, data_only=True)
        except Exception as e:
            logger.error(f"工作簿无法打开: {path}: {e}")
            return []

        try:
            if sheet_name not in wb.sheetnames:
                logger.error(f"工作表不存在: {sheet_name}")
                return []
            rows = wb[sheet_name].iter_rows(values_only=True)
            header = next(rows, None)
            if header is None:
                return []
            columns = [str(h).strip() if h is not None else "" for h in header]

            items = []
            for values in rows:
                if all(v is None or str(v).strip() == "" for v in values):
                    continue
                row = {
                    col: value
                    for col, value in zip(columns, values)
                    if col
                }
                items.append(Item.from_row(row, self.code_column, self.label_column))
            return items
        except Exception as e:
            logger.error(f"工作表读取失败: {sheet_name}: {e}")
            return []
        finally:
            wb.close()
