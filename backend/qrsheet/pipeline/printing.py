"""
打印协调器 - 所有工作表 → 一个多页打印文档 → 打印表面

职责：
1. 先获取打印表面；不可用则记录并返回（不构建、不提交任何内容）
2. 每页（≤15条）一页打印文档，与导出相同的3×5网格和1056×816尺寸
3. 空工作表不出现在文档中
4. 打印表面在所有退出路径上释放

测试要点：
- test_print_unavailable_surface: 不可用 → 中止且已释放
- test_print_one_page_per_page_of_items: 每页（≤15条）一张打印页
- test_print_paginates_large_sheet: 16条 → 2张打印页
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from ..config import RuntimeConfig, get_config
from ..interfaces import IPrintSurface
from ..layout import paginate
from ..models import BatchKind, BatchReport, FailureStage, PrintDocument, Sheet
from ..render import PageRenderer

logger = logging.getLogger(__name__)


class PrintCoordinator:
    """打印协调器"""

    def __init__(
        self,
        renderer: PageRenderer,
        surface: IPrintSurface,
        config: RuntimeConfig | None = None,
    ):
        self.config = config or get_config()
        self.renderer = renderer
        self.surface = surface

    async def print_all(self, sheets: Sequence[Sheet]) -> BatchReport:
        """打印全部工作表（总是正常返回）"""
        report = BatchReport(kind=BatchKind.PRINT)

        work = [(index, sheet) for index, sheet in enumerate(sheets) if not sheet.is_empty]
        if not work:
            logger.info("没有可打印的记录")
            report.mark_finished()
            return report

        try:
            try:
                await self.surface.acquire()
            except Exception as e:
                logger.warning(f"打印表面不可用，取消打印: {e}")
                report.mark_aborted(f"打印表面不可用: {e}")
                return report

            report.mark_running()
            document = await self._build_document(work, report)

            if not document.pages:
                logger.warning("没有可打印的页面")
                report.mark_finished()
                return report

            timeout = self.config.timeout_or_none(self.config.timeouts.print_sec)
            try:
                await asyncio.wait_for(self.surface.present(document), timeout=timeout)
            except asyncio.TimeoutError:
                logger.error(f"打印提交超时({timeout}s)")
                report.mark_aborted(f"打印提交超时({timeout}s)")
                return report
            except Exception as e:
                logger.error(f"打印提交失败: {e}")
                report.mark_aborted(f"打印提交失败: {e}")
                return report

            report.pages_printed = document.page_count
            report.mark_finished()
            logger.info(f"打印完成: {document.page_count}/{report.pages_total} 页")
            return report
        finally:
            await self._release()

    async def _build_document(
        self, work: list[tuple[int, Sheet]], report: BatchReport
    ) -> PrintDocument:
        """按工作表、页顺序组装打印文档"""
        document = PrintDocument()
        for index, sheet in work:
            directory = sheet.directory_name(index)
            for page in paginate(sheet.items, sheet_index=index, capacity=self.renderer.capacity):
                report.pages_total += 1
                try:
                    fragment = await self.renderer.render_fragment(page.items)
                except Exception as e:
                    logger.exception(f"打印页面生成失败，跳过: {directory}/{page.page_number}")
                    report.add_failure(
                        index, directory, page.page_number, FailureStage.RENDER, str(e)
                    )
                    continue
                document.pages.append(fragment)
        return document

    async def _release(self) -> None:
        try:
            await self.surface.release()
        except Exception:
            logger.exception("打印表面释放失败")
