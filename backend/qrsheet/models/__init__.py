"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- Item / Sheet: 输入记录与工作表
- Page / PageDocument / Bitmap / RenderFailure: 分页与渲染产物
- ExportTarget / PrintDocument: 导出与打印目标
- BatchReport: 一次导出/打印请求的结果
"""

from .item import DEFAULT_CODE_COLUMN, DEFAULT_LABEL_COLUMN, Item, Sheet
from .page import (
    EXPORT_FILENAME_TEMPLATE,
    Bitmap,
    ExportTarget,
    Page,
    PageDocument,
    PrintDocument,
    RenderFailure,
)
from .report import BatchKind, BatchReport, BatchStatus, FailureStage, PageFailure

__all__ = [
    "Item",
    "Sheet",
    "DEFAULT_CODE_COLUMN",
    "DEFAULT_LABEL_COLUMN",
    "Page",
    "PageDocument",
    "Bitmap",
    "RenderFailure",
    "ExportTarget",
    "PrintDocument",
    "EXPORT_FILENAME_TEMPLATE",
    "BatchReport",
    "BatchKind",
    "BatchStatus",
    "FailureStage",
    "PageFailure",
]
