"""
适配器模块 - 核心流程所依赖能力的具体实现

子模块：
- spreadsheet: openpyxl 表格读取
- markup: qrcode 二维码SVG
- pickers: 目标目录选择
- storage: 文件系统持久化
- print_surface: PDF文件 / 系统打印
"""

from .markup import QrcodeMarkupProvider
from .pickers import PromptDirectoryPicker, StaticDirectoryPicker
from .print_surface import PdfFilePrintSurface, SystemPrintSurface
from .spreadsheet import OpenpyxlSheetReader
from .storage import FileSystemSink

__all__ = [
    "OpenpyxlSheetReader",
    "QrcodeMarkupProvider",
    "StaticDirectoryPicker",
    "PromptDirectoryPicker",
    "FileSystemSink",
    "PdfFilePrintSurface",
    "SystemPrintSurface",
]
