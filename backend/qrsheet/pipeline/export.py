"""
导出协调器 - 工作表 → 分页 → 位图 → {root}/{sheet_dir}/cheat-sheet-{n}.png

职责：
1. 导出前只选择一次根目录；取消则不做任何写入
2. 每个工作表只计算一次目录名（清洗名称或 sheet-{i+1}）
3. 空工作表跳过（不建目录）
4. 失败隔离：单页渲染/写入失败只记录，继续下一页
5. 页码/文件名按位置分配，与完成顺序无关

测试要点：
- test_export_sixteen_items: 16条 → 2个文件
- test_export_skips_empty_sheet: 空工作表无目录
- test_export_persist_failure_continues: 第1页写入失败仍尝试第2页
- test_export_cancelled_picker: 取消选择 → 零写入
- test_numbering_by_position: 并发时编号仍按位置
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from ..config import RuntimeConfig, get_config
from ..interfaces import IDirectoryPicker, IPersistenceSink
from ..layout import paginate
from ..models import (
    BatchKind,
    BatchReport,
    ExportTarget,
    FailureStage,
    Page,
    RenderFailure,
    Sheet,
)
from ..render import PageRenderer

logger = logging.getLogger(__name__)


class ExportCoordinator:
    """导出协调器"""

    def __init__(
        self,
        renderer: PageRenderer,
        sink: IPersistenceSink,
        picker: IDirectoryPicker,
        config: RuntimeConfig | None = None,
    ):
        self.config = config or get_config()
        self.renderer = renderer
        self.sink = sink
        self.picker = picker

    async def export_all(
        self,
        sheets: Sequence[Sheet],
        cancel: asyncio.Event | None = None,
    ) -> BatchReport:
        """导出全部工作表（总是正常返回）"""
        report = BatchReport(kind=BatchKind.EXPORT)

        work = [(index, sheet) for index, sheet in enumerate(sheets) if not sheet.is_empty]
        if not work:
            logger.info("没有可导出的记录")
            report.mark_finished()
            return report

        root = await self.picker.choose_directory()
        if root is None:
            logger.warning("未选择导出目录，取消导出")
            report.mark_cancelled("未选择导出目录")
            return report

        report.destination = Path(root)
        report.mark_running()

        jobs = self._plan(work, report)
        report.pages_total = len(jobs)
        logger.info(f"开始导出: {len(work)} 个工作表, {len(jobs)} 页 → {root}")

        results = await self._run_pages(report.destination, jobs, report, cancel)
        report.written = [path for path in results if path is not None]

        positions = {(page.sheet_index, page.page_number): i for i, (_, page) in enumerate(jobs)}
        report.failures.sort(key=lambda f: positions.get((f.sheet_index, f.page_number), 0))

        if cancel is not None and cancel.is_set():
            logger.warning(f"导出已取消: 已写入 {len(report.written)}/{len(jobs)} 页")
            report.mark_cancelled("导出已取消")
        else:
            report.mark_finished()
            logger.info(
                f"导出完成: 写入 {len(report.written)}/{len(jobs)} 页, 失败 {len(report.failures)} 页"
            )
        return report

    def _plan(
        self, work: list[tuple[int, Sheet]], report: BatchReport
    ) -> list[tuple[str, Page]]:
        """按位置生成 (目录名, 页) 列表"""
        jobs: list[tuple[str, Page]] = []
        seen: dict[str, int] = {}
        for index, sheet in work:
            directory = sheet.directory_name(index)
            if directory in seen:
                logger.warning(
                    f"工作表目录名冲突: 第{seen[directory] + 1}个与第{index + 1}个工作表都映射到 {directory}"
                )
                report.add_flag(f"目录名冲突:{directory}")
            seen.setdefault(directory, index)

            pages = paginate(sheet.items, sheet_index=index, capacity=self.renderer.capacity)
            logger.debug(f"工作表 {sheet.name!r} → {directory}: {len(sheet.items)} 条, {len(pages)} 页")
            jobs.extend((directory, page) for page in pages)
        return jobs

    async def _run_pages(
        self,
        root: Path,
        jobs: list[tuple[str, Page]],
        report: BatchReport,
        cancel: asyncio.Event | None,
    ) -> list[Path | None]:
        """顺序或有界并发执行各页；结果按位置排列"""
        limit = self.config.concurrency.max_pages_in_flight

        if limit <= 1:
            results: list[Path | None] = []
            for directory, page in jobs:
                if cancel is not None and cancel.is_set():
                    break
                results.append(await self._export_page(root, directory, page, report))
            return results

        semaphore = asyncio.Semaphore(limit)

        async def bounded(directory: str, page: Page) -> Path | None:
            async with semaphore:
                if cancel is not None and cancel.is_set():
                    return None
                return await self._export_page(root, directory, page, report)

        return list(await asyncio.gather(*(bounded(d, p) for d, p in jobs)))

    async def _export_page(
        self,
        root: Path,
        directory: str,
        page: Page,
        report: BatchReport,
    ) -> Path | None:
        """渲染并写入单页；失败返回None"""
        try:
            result = await self.renderer.render(page.items)
        except Exception as e:
            logger.exception(f"页面渲染异常，跳过: {directory}/{page.page_number}")
            report.add_failure(page.sheet_index, directory, page.page_number, FailureStage.RENDER, str(e))
            return None

        if isinstance(result, RenderFailure):
            logger.warning(f"页面渲染失败，跳过: {directory}/{page.page_number}: {result.reason}")
            report.add_failure(
                page.sheet_index, directory, page.page_number, FailureStage.RENDER, result.reason
            )
            return None

        target = ExportTarget(directory=directory, page_number=page.page_number, bitmap=result)
        timeout = self.config.timeout_or_none(self.config.timeouts.persist_sec)
        try:
            return await asyncio.wait_for(
                self.sink.write_image(root / target.directory, target.filename, target.bitmap.png),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            reason = f"写入超时({timeout}s)"
        except Exception as e:
            reason = str(e) or type(e).__name__

        logger.warning(f"图片保存失败: {directory}/{target.filename}: {reason}")
        report.add_failure(page.sheet_index, directory, page.page_number, FailureStage.PERSIST, reason)
        return None
