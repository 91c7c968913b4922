"""
光栅化引擎 - SVG页面文档 → PNG位图 / 多页PDF

职责：
1. SVG光栅化为精确像素尺寸的PNG（白底RGB）
2. 多个SVG页面合成为一个多页PDF（打印路径）

依赖：
- cairosvg: SVG渲染（每次调用独立创建/销毁cairo表面，不复用）
- Pillow: 校验像素尺寸并去除透明通道
- pypdf: 合并单页PDF

测试要点：
- test_rasterize_exact_size: 输出像素尺寸精确
- test_rasterize_invalid_svg: 无效文档 → RenderError
- test_compose_pdf_page_count: 每个文档一页
"""

from __future__ import annotations

import io
import logging

from PIL import Image

from ..interfaces import IRasterizer, RenderError

logger = logging.getLogger(__name__)


class CairoRasterizer(IRasterizer):
    """基于 cairosvg 的光栅化实现"""

    def rasterize(self, document: str, width: int, height: int) -> bytes:
        """SVG → PNG（尺寸必须与请求一致）"""
        cairosvg = self._load_cairosvg()
        try:
            raw = cairosvg.svg2png(
                bytestring=document.encode("utf-8"),
                output_width=width,
                output_height=height,
            )
        except Exception as e:
            raise RenderError(f"SVG光栅化失败: {e}") from e

        return self._flatten_png(raw, width, height)

    def compose_pdf(self, documents: list[str]) -> bytes:
        """多个SVG页面 → 一个多页PDF"""
        if not documents:
            raise RenderError("没有可合成的页面")

        cairosvg = self._load_cairosvg()
        from pypdf import PdfWriter

        writer = PdfWriter()
        try:
            for document in documents:
                page_pdf = cairosvg.svg2pdf(bytestring=document.encode("utf-8"))
                writer.append(io.BytesIO(page_pdf))
            out = io.BytesIO()
            writer.write(out)
        except Exception as e:
            raise RenderError(f"PDF合成失败: {e}") from e

        logger.debug(f"PDF合成完成: {len(documents)} 页")
        return out.getvalue()

    @staticmethod
    def _load_cairosvg():
        """延迟加载cairosvg（依赖本机cairo库）"""
        try:
            import cairosvg
        except (ImportError, OSError) as e:
            raise RenderError(f"cairosvg不可用，无法创建渲染表面: {e}") from e
        return cairosvg

    @staticmethod
    def _flatten_png(raw: bytes, width: int, height: int) -> bytes:
        """校验尺寸并合成到白色背景"""
        try:
            with Image.open(io.BytesIO(raw)) as img:
                if img.size != (width, height):
                    raise RenderError(
                        f"位图尺寸不符: 期望 {width}x{height}，实际 {img.size[0]}x{img.size[1]}"
                    )
                rgba = img.convert("RGBA")
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"位图读取失败: {e}") from e

        background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
        flattened = Image.alpha_composite(background, rgba).convert("RGB")
        out = io.BytesIO()
        flattened.save(out, format="PNG")
        return out.getvalue()
