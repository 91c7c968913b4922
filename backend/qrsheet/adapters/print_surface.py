"""
打印表面 - 接收完整的多页打印文档

实现：
- PdfFilePrintSurface: 输出到PDF文件（“打印到文件”）
- SystemPrintSurface: 生成临时PDF并交给系统打印命令（lp/lpr）

两者都是作用域资源：acquire → present → release，
release 在所有退出路径上调用且可重复调用。
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path

from ..interfaces import IPrintSurface, IRasterizer, PrintSurfaceUnavailable
from ..models import PrintDocument
from ..render import CairoRasterizer

logger = logging.getLogger(__name__)

# lp 不存在时依次尝试
_SPOOLER_FALLBACKS = ("lp", "lpr")


class PdfFilePrintSurface(IPrintSurface):
    """打印到PDF文件"""

    def __init__(self, path: str | Path, rasterizer: IRasterizer | None = None):
        self.path = Path(path)
        self.rasterizer = rasterizer or CairoRasterizer()
        self.acquired = False

    async def acquire(self) -> None:
        parent = self.path.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PrintSurfaceUnavailable(f"输出目录不可用: {parent}: {e}") from e
        if not os.access(parent, os.W_OK):
            raise PrintSurfaceUnavailable(f"输出目录不可写: {parent}")
        self.acquired = True

    async def present(self, document: PrintDocument) -> None:
        if not self.acquired:
            raise PrintSurfaceUnavailable("打印表面未获取")
        pdf = await asyncio.to_thread(
            self.rasterizer.compose_pdf, [page.svg for page in document.pages]
        )
        await asyncio.to_thread(self.path.write_bytes, pdf)
        logger.info(f"打印文档已输出: {self.path} ({document.page_count} 页)")

    async def release(self) -> None:
        self.acquired = False


class SystemPrintSurface(IPrintSurface):
    """系统打印（lp / lpr）"""

    def __init__(
        self,
        printer: str | None = None,
        command: str = "lp",
        timeout: float | None = None,
        rasterizer: IRasterizer | None = None,
    ):
        self.printer = printer
        self.command = command
        self.timeout = timeout
        self.rasterizer = rasterizer or CairoRasterizer()
        self._executable: str | None = None
        self._spool_file: Path | None = None

    async def acquire(self) -> None:
        self._executable = self._find_spooler()
        if self._executable is None:
            raise PrintSurfaceUnavailable(f"未找到打印命令: {self.command}")
        fd, name = tempfile.mkstemp(prefix="qrsheet-print-", suffix=".pdf")
        os.close(fd)
        self._spool_file = Path(name)

    async def present(self, document: PrintDocument) -> None:
        if self._executable is None or self._spool_file is None:
            raise PrintSurfaceUnavailable("打印表面未获取")
        pdf = await asyncio.to_thread(
            self.rasterizer.compose_pdf, [page.svg for page in document.pages]
        )
        self._spool_file.write_bytes(pdf)
        await asyncio.to_thread(self._spool, self._spool_file)
        logger.info(f"已提交打印: {document.page_count} 页")

    async def release(self) -> None:
        if self._spool_file is not None:
            self._spool_file.unlink(missing_ok=True)
            self._spool_file = None
        self._executable = None

    def _find_spooler(self) -> str | None:
        candidates = [self.command] + [c for c in _SPOOLER_FALLBACKS if c != self.command]
        for candidate in candidates:
            found = shutil.which(candidate)
            if found:
                return found
        return None

    def _spool(self, pdf_path: Path) -> None:
        executable = self._executable
        is_lpr = Path(executable).name.startswith("lpr")
        cmd = [executable]
        if self.printer:
            cmd += ["-P" if is_lpr else "-d", self.printer]
        cmd.append(str(pdf_path))

        try:
            subprocess.run(cmd, capture_output=True, timeout=self.timeout, check=True)
        except subprocess.TimeoutExpired as e:
            raise PrintSurfaceUnavailable(f"打印命令超时: {' '.join(cmd)}") from e
        except subprocess.CalledProcessError as e:
            raise PrintSurfaceUnavailable(f"打印命令失败: {e.stderr}") from e
