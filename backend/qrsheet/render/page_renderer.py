"""
页面渲染器 - 单页记录 → SVG页面文档 → 位图

职责：
1. 按记录顺序逐条获取二维码标记（每条一次）
2. 组装固定尺寸（1056×816）的3×5网格页面文档
3. 导出路径：光栅化为位图；打印路径：直接返回页面文档
4. 失败隔离：光栅化失败返回 RenderFailure，不抛出

单元格内容：二维码在上、编码文本在下（左侧），标签文本在右侧。

测试要点：
- test_markup_requested_in_order: 标记请求顺序
- test_cells_placed_row_major: 单元格位置
- test_unused_cells_blank: 空单元格留白
- test_render_failure_sentinel: 光栅化失败哨兵
- test_markup_timeout_degrades: 标记超时降级为空
"""

from __future__ import annotations

import asyncio
import logging
import re
import textwrap
import xml.etree.ElementTree as ET
from collections.abc import Sequence

from ..config import RuntimeConfig, get_config
from ..interfaces import IMarkupProvider, IRasterizer
from ..layout import CellBox, GridLayout
from ..models import Bitmap, Item, PageDocument, RenderFailure
from .rasterizer import CairoRasterizer

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
ET.register_namespace("", SVG_NS)

_XML_DECL_RE = re.compile(r"^\s*<\?xml[^>]*\?>")
# XML 1.0 不允许的控制字符
_XML_ILLEGAL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")
_LENGTH_RE = re.compile(r"^\s*([0-9.]+)")

# 按平均字宽估算每行字符数（Arial 约 0.55em）
_AVG_CHAR_EM = 0.55
_LINE_HEIGHT_EM = 1.2


def _q(tag: str) -> str:
    return f"{{{SVG_NS}}}{tag}"


def _fmt(value: float) -> str:
    return f"{value:g}"


def _xml_text(value: str) -> str:
    return _XML_ILLEGAL_RE.sub("", value)


class PageRenderer:
    """页面渲染器"""

    def __init__(
        self,
        markup_provider: IMarkupProvider,
        rasterizer: IRasterizer | None = None,
        config: RuntimeConfig | None = None,
    ):
        self.config = config or get_config()
        self.markup_provider = markup_provider
        self.rasterizer = rasterizer or CairoRasterizer()
        self.grid = GridLayout(self.config.layout)

    @property
    def capacity(self) -> int:
        return self.grid.capacity

    async def build_document(self, items: Sequence[Item]) -> PageDocument:
        """组装页面文档（记录数超过容量时抛 ValueError）"""
        cells = self.grid.cells(len(items))

        markups: list[str] = []
        for item in items:
            markups.append(await self._fetch_markup(item.code))

        layout = self.config.layout
        svg = self._compose_svg(items, markups, cells)
        return PageDocument(
            svg=svg,
            width=layout.width,
            height=layout.height,
            markups=tuple(markups),
        )

    async def render(self, items: Sequence[Item]) -> Bitmap | RenderFailure:
        """导出路径：页面文档光栅化为位图；失败返回 RenderFailure"""
        document = await self.build_document(items)
        timeout = self.config.timeout_or_none(self.config.timeouts.rasterize_sec)

        try:
            png = await asyncio.wait_for(
                asyncio.to_thread(
                    self.rasterizer.rasterize,
                    document.svg,
                    document.width,
                    document.height,
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"光栅化超时({timeout}s)，跳过该页")
            return RenderFailure(reason=f"光栅化超时({timeout}s)")
        except Exception as e:
            logger.warning(f"光栅化失败: {e}")
            return RenderFailure(reason=str(e) or type(e).__name__)

        return Bitmap(width=document.width, height=document.height, png=png)

    async def render_fragment(self, items: Sequence[Item]) -> PageDocument:
        """打印路径：返回可嵌入打印文档的页面"""
        return await self.build_document(items)

    async def _fetch_markup(self, code: str) -> str:
        """获取单条二维码标记（超时/异常降级为空字符串）"""
        timeout = self.config.timeout_or_none(self.config.timeouts.markup_sec)
        try:
            markup = await asyncio.wait_for(
                self.markup_provider.get_markup(code), timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"二维码生成超时({timeout}s): {code!r}")
            return ""
        except Exception as e:
            logger.warning(f"二维码生成失败: {code!r}: {e}")
            return ""
        return markup or ""

    # ------------------------------------------------------------------
    # SVG 组装
    # ------------------------------------------------------------------

    def _compose_svg(
        self,
        items: Sequence[Item],
        markups: Sequence[str],
        cells: Sequence[CellBox],
    ) -> str:
        layout = self.config.layout
        root = ET.Element(
            _q("svg"),
            {
                "version": "1.1",
                "width": str(layout.width),
                "height": str(layout.height),
                "viewBox": f"0 0 {layout.width} {layout.height}",
            },
        )
        ET.SubElement(
            root,
            _q("rect"),
            {"x": "0", "y": "0", "width": str(layout.width), "height": str(layout.height), "fill": "white"},
        )

        for item, markup, cell in zip(items, markups, cells):
            root.append(self._compose_cell(item, markup, cell))

        return ET.tostring(root, encoding="unicode")

    def _compose_cell(self, item: Item, markup: str, cell: CellBox) -> ET.Element:
        layout = self.config.layout
        group = ET.Element(
            _q("g"),
            {"class": "item", "transform": f"translate({_fmt(cell.x)},{_fmt(cell.y)})"},
        )
        ET.SubElement(
            group,
            _q("rect"),
            {
                "x": "0.5",
                "y": "0.5",
                "width": _fmt(cell.width - 1),
                "height": _fmt(cell.height - 1),
                "rx": str(layout.corner_radius),
                "fill": "none",
                "stroke": "black",
                "stroke-dasharray": "4 2",
            },
        )

        # 二维码 + 编码文本整体在单元格内垂直居中
        block_height = layout.qr_size + layout.code_font_size
        qr_x = layout.padding
        qr_y = max(layout.padding, (cell.height - block_height) / 2)

        qr = self._embed_markup(markup, qr_x, qr_y, layout.qr_size)
        if qr is not None:
            group.append(qr)

        code_text = ET.SubElement(
            group,
            _q("text"),
            {
                "class": "upc",
                "x": _fmt(qr_x + layout.qr_size / 2),
                "y": _fmt(qr_y + layout.qr_size + layout.code_font_size * 0.8),
                "text-anchor": "middle",
                "font-family": layout.font_family,
                "font-size": _fmt(layout.code_font_size),
            },
        )
        code_text.text = _xml_text(item.code)

        label_x = qr_x + layout.qr_size + layout.label_gap
        label_width = cell.width - label_x - layout.padding
        self._append_label(group, item.label, label_x, label_width, cell.height)
        return group

    def _append_label(
        self, group: ET.Element, label: str, x: float, width: float, cell_height: float
    ) -> None:
        """标签文本按宽度折行，超出单元格高度的行截断"""
        if not label:
            return
        layout = self.config.layout
        font_size = layout.label_font_size
        line_height = font_size * _LINE_HEIGHT_EM
        chars_per_line = max(1, int(width / (font_size * _AVG_CHAR_EM)))
        max_lines = max(1, int((cell_height - 2 * layout.padding) / line_height))

        lines = textwrap.wrap(_xml_text(label), width=chars_per_line)[:max_lines]
        if not lines:
            return

        first_baseline = (cell_height - line_height * len(lines)) / 2 + font_size
        text = ET.SubElement(
            group,
            _q("text"),
            {
                "class": "description",
                "x": _fmt(x),
                "y": _fmt(first_baseline),
                "font-family": layout.font_family,
                "font-size": _fmt(font_size),
            },
        )
        for i, line in enumerate(lines):
            tspan = ET.SubElement(
                text,
                _q("tspan"),
                {"x": _fmt(x), "y": _fmt(first_baseline + i * line_height)},
            )
            tspan.text = line

    def _embed_markup(self, markup: str, x: float, y: float, size: float) -> ET.Element | None:
        """将二维码SVG作为嵌套 <svg> 放到 (x, y)，边长 size"""
        if not markup.strip():
            return None
        try:
            element = ET.fromstring(_XML_DECL_RE.sub("", markup, count=1))
        except ET.ParseError as e:
            logger.warning(f"二维码标记无法解析，留白: {e}")
            return None

        if element.tag not in (_q("svg"), "svg"):
            logger.warning(f"二维码标记根节点不是svg，留白: {element.tag}")
            return None

        for node in element.iter():
            if isinstance(node.tag, str) and not node.tag.startswith("{"):
                node.tag = _q(node.tag)
            # 同页多个二维码，去掉重复id
            node.attrib.pop("id", None)

        view_box = element.get("viewBox") or self._view_box_from_size(element)
        if view_box:
            element.set("viewBox", view_box)
        element.set("x", _fmt(x))
        element.set("y", _fmt(y))
        element.set("width", _fmt(size))
        element.set("height", _fmt(size))
        return element

    @staticmethod
    def _view_box_from_size(element: ET.Element) -> str | None:
        width = _LENGTH_RE.match(element.get("width", ""))
        height = _LENGTH_RE.match(element.get("height", ""))
        if width and height:
            return f"0 0 {width.group(1)} {height.group(1)}"
        return None
