"""
页面模型 - 分页与渲染流程中的中间产物

生命周期：
- Page: 由 Paginator 生成，最多 PAGE_CAPACITY 条记录
- PageDocument: 由 PageRenderer 按需生成（SVG文档 + 每条记录的二维码标记）
- Bitmap / RenderFailure: 导出路径的光栅化结果
- ExportTarget: (目录名, 页码, 位图) 三元组，持久化后即丢弃
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .item import Item

EXPORT_FILENAME_TEMPLATE = "cheat-sheet-{page}.png"


class Page(BaseModel):
    """单页：来自同一工作表的有序记录切片"""
    sheet_index: int = 0
    page_number: int = Field(..., ge=1, description="页码(1起，按工作表计)")
    items: tuple[Item, ...] = ()

    model_config = {"frozen": True}

    @property
    def size(self) -> int:
        return len(self.items)


class PageDocument(BaseModel):
    """页面文档（打印路径直接嵌入，导出路径再光栅化）"""
    svg: str
    width: int
    height: int
    markups: tuple[str, ...] = ()

    model_config = {"frozen": True}

    @property
    def item_count(self) -> int:
        return len(self.markups)


class Bitmap(BaseModel):
    """光栅化位图（PNG）"""
    width: int
    height: int
    png: bytes

    model_config = {"frozen": True}


class RenderFailure(BaseModel):
    """渲染失败哨兵值 - 调用方按“跳过该页，不中断”处理"""
    reason: str

    model_config = {"frozen": True}


class ExportTarget(BaseModel):
    """导出目标"""
    directory: str
    page_number: int = Field(..., ge=1)
    bitmap: Bitmap

    @property
    def filename(self) -> str:
        return EXPORT_FILENAME_TEMPLATE.format(page=self.page_number)


class PrintDocument(BaseModel):
    """多页打印文档（每个 PageDocument 一页，页后自动分页）"""
    pages: list[PageDocument] = Field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)
