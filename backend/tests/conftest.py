"""
pytest 配置与公共 fixtures

所有外部能力（二维码/光栅化/持久化/目录选择/打印表面）都有内存 fake，
协调器测试不依赖 cairo 或真实打印机。

使用方式：
    def test_something(renderer, make_items):
        doc = asyncio.run(renderer.build_document(make_items(3)))
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Callable

import pytest

from qrsheet.config import RuntimeConfig
from qrsheet.interfaces import (
    IDirectoryPicker,
    IMarkupProvider,
    IPersistenceSink,
    IPrintSurface,
    IRasterizer,
    PersistenceError,
    PrintSurfaceUnavailable,
    RenderError,
)
from qrsheet.models import Item, PrintDocument, Sheet
from qrsheet.render import PageRenderer

FAKE_PNG = b"\x89PNG\r\n\x1a\nfake"

QR_SVG = (
    "<?xml version='1.0' encoding='UTF-8'?>\n"
    '<svg xmlns="http://www.w3.org/2000/svg" width="25mm" height="25mm" version="1.1" viewBox="0 0 25 25">'
    '<path d="M4,4H5V5H4z" id="qr-path" fill="#000000"/></svg>'
)


# ============================================================================
# Fakes
# ============================================================================

class FakeMarkupProvider(IMarkupProvider):
    """记录调用顺序的二维码提供者"""

    def __init__(self, fail_codes: set[str] | None = None, delay: float = 0):
        self.calls: list[str] = []
        self.fail_codes = fail_codes or set()
        self.delay = delay

    async def get_markup(self, code: str) -> str:
        self.calls.append(code)
        if self.delay:
            await asyncio.sleep(self.delay)
        if code in self.fail_codes:
            raise RuntimeError(f"cannot encode {code}")
        return QR_SVG


class FakeRasterizer(IRasterizer):
    """返回固定PNG的光栅化器；fail_calls 指定第几次调用失败（1起）"""

    def __init__(self, fail_calls: set[int] | None = None, fail_all: bool = False, delay: float = 0):
        self.documents: list[str] = []
        self.sizes: list[tuple[int, int]] = []
        self.composed: list[list[str]] = []
        self.fail_calls = fail_calls or set()
        self.fail_all = fail_all
        self.delay = delay

    def rasterize(self, document: str, width: int, height: int) -> bytes:
        self.documents.append(document)
        self.sizes.append((width, height))
        if self.delay:
            time.sleep(self.delay)
        if self.fail_all or len(self.documents) in self.fail_calls:
            raise RenderError("rendering surface lost")
        return FAKE_PNG

    def compose_pdf(self, documents: list[str]) -> bytes:
        self.composed.append(list(documents))
        return b"%PDF-1.4 fake"


class RecordingSink(IPersistenceSink):
    """内存持久化；fail_files 中的文件名写入失败"""

    def __init__(
        self,
        fail_files: set[str] | None = None,
        delays: dict[str, float] | None = None,
        on_write: Callable[[Path], None] | None = None,
    ):
        self.attempts: list[Path] = []
        self.writes: dict[Path, bytes] = {}
        self.fail_files = fail_files or set()
        self.delays = delays or {}
        self.on_write = on_write

    async def write_image(self, directory: Path, filename: str, payload: bytes | str) -> Path:
        path = Path(directory) / filename
        self.attempts.append(path)
        delay = self.delays.get(f"{Path(directory).name}/{filename}", 0)
        if delay:
            await asyncio.sleep(delay)
        if filename in self.fail_files:
            raise PersistenceError(f"disk full: {path}")
        self.writes[path] = payload
        if self.on_write:
            self.on_write(path)
        return path


class CountingPicker(IDirectoryPicker):
    """记录被调用次数的目录选择器"""

    def __init__(self, directory: Path | None):
        self.directory = directory
        self.calls = 0

    async def choose_directory(self) -> Path | None:
        self.calls += 1
        return self.directory


class FakePrintSurface(IPrintSurface):
    """记录 acquire/present/release 事件的打印表面"""

    def __init__(self, available: bool = True, fail_present: bool = False):
        self.available = available
        self.fail_present = fail_present
        self.events: list[str] = []
        self.documents: list[PrintDocument] = []

    async def acquire(self) -> None:
        self.events.append("acquire")
        if not self.available:
            raise PrintSurfaceUnavailable("print window blocked")

    async def present(self, document: PrintDocument) -> None:
        self.events.append("present")
        if self.fail_present:
            raise RuntimeError("printer jammed")
        self.documents.append(document)

    async def release(self) -> None:
        self.events.append("release")


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """运行期配置（默认值）"""
    return RuntimeConfig()


@pytest.fixture
def make_items() -> Callable[..., list[Item]]:
    """生成 n 条记录（code=C001.., label=Item 1..）"""

    def _make(n: int, prefix: str = "C") -> list[Item]:
        return [
            Item(code=f"{prefix}{i:03d}", label=f"Item {i}", fields={"PRICE": str(i)})
            for i in range(1, n + 1)
        ]

    return _make


@pytest.fixture
def make_sheet(make_items) -> Callable[..., Sheet]:
    def _make(name: str | None, n: int) -> Sheet:
        return Sheet(name=name, items=make_items(n, prefix=(name or "S")[:1]))

    return _make


@pytest.fixture
def fake_markup() -> FakeMarkupProvider:
    return FakeMarkupProvider()


@pytest.fixture
def fake_rasterizer() -> FakeRasterizer:
    return FakeRasterizer()


@pytest.fixture
def renderer(
    fake_markup: FakeMarkupProvider,
    fake_rasterizer: FakeRasterizer,
    runtime_config: RuntimeConfig,
) -> PageRenderer:
    """使用 fake 能力的页面渲染器"""
    return PageRenderer(fake_markup, fake_rasterizer, config=runtime_config)
