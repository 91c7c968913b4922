"""
二维码标记提供者 - 基于 qrcode 库生成SVG

失败（编码异常等）时返回空字符串，不向外抛出。
"""

from __future__ import annotations

import asyncio
import io
import logging

import qrcode
from qrcode.image.svg import SvgPathImage

from ..interfaces import IMarkupProvider

logger = logging.getLogger(__name__)


class QrcodeMarkupProvider(IMarkupProvider):
    """qrcode SVG路径图实现"""

    def __init__(
        self,
        error_correction: int = qrcode.constants.ERROR_CORRECT_M,
        border: int = 4,
    ):
        self.error_correction = error_correction
        self.border = border

    async def get_markup(self, code: str) -> str:
        """生成二维码SVG（在线程中编码）"""
        try:
            return await asyncio.to_thread(self._encode, code)
        except Exception as e:
            logger.warning(f"二维码编码失败: {code!r}: {e}")
            return ""

    def _encode(self, code: str) -> str:
        qr = qrcode.QRCode(
            error_correction=self.error_correction,
            border=self.border,
            image_factory=SvgPathImage,
        )
        qr.add_data(code)
        qr.make(fit=True)
        img = qr.make_image()

        buf = io.BytesIO()
        img.save(buf)
        return buf.getvalue().decode("utf-8")
