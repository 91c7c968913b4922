"""
模块接口契约 - 定义核心流程依赖的外部能力（Capability）

设计原则：
1. 核心（分页/渲染/导出/打印）只依赖这些接口，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和fake替换

使用方式：
    from qrsheet.interfaces import IPersistenceSink

    class MySink(IPersistenceSink):
        async def write_image(self, directory: Path, filename: str, payload: bytes) -> Path:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Item, PrintDocument, Sheet


# ============================================================================
# 输入侧接口
# ============================================================================

class ISheetReader(ABC):
    """表格读取器接口 - 提供工作表名称与有序记录"""

    @abstractmethod
    def list_sheet_names(self, path: Path) -> list[str]:
        """
        列出工作簿中的工作表名称

        Args:
            path: 工作簿路径

        Returns:
            工作表名称列表（保持工作簿中的顺序）

        Raises:
            SheetReadError: 工作簿无法打开
        """
        ...

    @abstractmethod
    def read_sheet(self, path: Path, sheet_name: str) -> list[Item]:
        """
        读取单个工作表的记录

        Returns:
            有序记录列表；读取失败返回空列表（不抛出）
        """
        ...

    def load_sheets(self, path: Path, names: list[str] | None = None) -> list[Sheet]:
        """按名称读取多个工作表（默认全部）"""
        from .models import Sheet

        selected = names if names is not None else self.list_sheet_names(path)
        return [Sheet(name=name, items=self.read_sheet(path, name)) for name in selected]


class IMarkupProvider(ABC):
    """二维码矢量标记提供者接口"""

    @abstractmethod
    async def get_markup(self, code: str) -> str:
        """
        生成二维码SVG标记

        Args:
            code: 待编码文本（Item.code）

        Returns:
            SVG字符串；失败时返回空字符串，不向外抛出
        """
        ...


# ============================================================================
# 渲染接口
# ============================================================================

class IRasterizer(ABC):
    """光栅化接口 - 页面文档 → 位图 / 打印文档"""

    @abstractmethod
    def rasterize(self, document: str, width: int, height: int) -> bytes:
        """
        将SVG页面文档光栅化为PNG

        Args:
            document: SVG页面文档
            width: 输出像素宽度（必须精确）
            height: 输出像素高度（必须精确）

        Returns:
            PNG字节

        Raises:
            RenderError: 渲染表面无法创建或截取
        """
        ...

    @abstractmethod
    def compose_pdf(self, documents: list[str]) -> bytes:
        """
        将多个SVG页面文档合成为多页PDF（每个文档一页）

        Raises:
            RenderError: 合成失败
        """
        ...


# ============================================================================
# 输出侧接口
# ============================================================================

class IDirectoryPicker(ABC):
    """目标目录选择器接口"""

    @abstractmethod
    async def choose_directory(self) -> Path | None:
        """
        选择导出根目录

        Returns:
            目录路径；用户取消时返回None
        """
        ...


class IPersistenceSink(ABC):
    """持久化接口 - 位图写入"""

    @abstractmethod
    async def write_image(self, directory: Path, filename: str, payload: bytes | str) -> Path:
        """
        写入单张图片（目录不存在时自动创建）

        Args:
            directory: 目标目录
            filename: 文件名
            payload: PNG字节，或 data:image/png;base64, 前缀的字符串

        Returns:
            写入的文件路径

        Raises:
            PersistenceError: 写入失败
        """
        ...


class IPrintSurface(ABC):
    """打印表面接口 - 作用域资源（acquire → present → release）"""

    @abstractmethod
    async def acquire(self) -> None:
        """
        获取打印表面

        Raises:
            PrintSurfaceUnavailable: 打印表面不可用
        """
        ...

    @abstractmethod
    async def present(self, document: PrintDocument) -> None:
        """提交完整的多页打印文档"""
        ...

    @abstractmethod
    async def release(self) -> None:
        """释放打印表面（所有退出路径都必须调用，可重复调用）"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class QrSheetError(Exception):
    """基础异常"""
    pass


class SheetReadError(QrSheetError):
    """表格读取错误"""
    pass


class RenderError(QrSheetError):
    """渲染/光栅化错误"""
    pass


class PersistenceError(QrSheetError):
    """持久化错误"""
    pass


class PrintSurfaceUnavailable(QrSheetError):
    """打印表面不可用"""
    pass
