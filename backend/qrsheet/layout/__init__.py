"""
版面模块 - 目录名清洗、分页与网格几何

子模块：
- sanitizer: 工作表名称 → 目录片段
- paginator: 记录 → 固定容量的页
- grid: 3×5 网格单元格位置
"""

from .grid import CellBox, GridLayout
from .paginator import PAGE_CAPACITY, page_count, paginate
from .sanitizer import ILLEGAL_CHARS, fallback_directory, sanitize, sheet_directory_name

__all__ = [
    "sanitize",
    "fallback_directory",
    "sheet_directory_name",
    "ILLEGAL_CHARS",
    "paginate",
    "page_count",
    "PAGE_CAPACITY",
    "GridLayout",
    "CellBox",
]
