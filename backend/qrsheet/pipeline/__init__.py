"""
流水线模块 - 导出与打印编排

子模块：
- export: 分页 → 位图 → 持久化
- printing: 分页 → 多页打印文档 → 打印表面
"""

from .export import ExportCoordinator
from .printing import PrintCoordinator

__all__ = [
    "ExportCoordinator",
    "PrintCoordinator",
]
