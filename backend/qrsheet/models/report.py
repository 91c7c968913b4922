"""
批处理报告模型 - 记录一次导出/打印请求的状态与结果

导出/打印请求永远正常返回；失败页不会重试，只记录在报告中。
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class BatchStatus(str, Enum):
    """批处理状态枚举"""
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    PARTIAL = "partial"        # 部分页面失败
    CANCELLED = "cancelled"    # 用户取消（目录选择/取消令牌）
    ABORTED = "aborted"        # 能力不可用（如打印表面）


class BatchKind(str, Enum):
    """批处理类型"""
    EXPORT = "export"
    PRINT = "print"


class FailureStage(str, Enum):
    """失败所在环节"""
    RENDER = "render"
    PERSIST = "persist"
    PRINT = "print"


class PageFailure(BaseModel):
    """单页失败记录"""
    sheet_index: int
    sheet_directory: str
    page_number: int
    stage: FailureStage
    reason: str


class BatchReport(BaseModel):
    """批处理报告"""
    batch_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    kind: BatchKind
    status: BatchStatus = BatchStatus.QUEUED

    destination: Path | None = None
    pages_total: int = 0
    pages_printed: int = 0
    written: list[Path] = Field(default_factory=list)
    failures: list[PageFailure] = Field(default_factory=list)
    flags: list[str] = Field(default_factory=list, description="告警标记")

    created_at: datetime = Field(default_factory=datetime.now)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    def mark_running(self) -> None:
        """标记为运行中"""
        self.status = BatchStatus.RUNNING
        self.started_at = datetime.now()

    def mark_finished(self) -> None:
        """按失败情况标记为成功或部分成功"""
        self.status = BatchStatus.PARTIAL if self.failures else BatchStatus.SUCCEEDED
        self.finished_at = datetime.now()

    def mark_cancelled(self, reason: str) -> None:
        """标记为已取消"""
        self.status = BatchStatus.CANCELLED
        self.finished_at = datetime.now()
        self.add_flag(reason)

    def mark_aborted(self, reason: str) -> None:
        """标记为已中止（能力不可用）"""
        self.status = BatchStatus.ABORTED
        self.finished_at = datetime.now()
        self.add_flag(reason)

    def add_failure(
        self,
        sheet_index: int,
        sheet_directory: str,
        page_number: int,
        stage: FailureStage,
        reason: str,
    ) -> None:
        """记录单页失败（不中断）"""
        self.failures.append(
            PageFailure(
                sheet_index=sheet_index,
                sheet_directory=sheet_directory,
                page_number=page_number,
                stage=stage,
                reason=reason,
            )
        )
        self.add_flag(f"{stage.value}失败:{sheet_directory}/{page_number}")

    def add_flag(self, flag: str) -> None:
        """添加告警标记（去重）"""
        if flag not in self.flags:
            self.flags.append(flag)
