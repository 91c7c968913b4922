"""
渲染模块 - 页面文档组装与光栅化

子模块：
- page_renderer: 单页记录 → SVG页面文档 → 位图
- rasterizer: SVG → PNG / 多页PDF
"""

from .page_renderer import PageRenderer
from .rasterizer import CairoRasterizer

__all__ = [
    "PageRenderer",
    "CairoRasterizer",
]
