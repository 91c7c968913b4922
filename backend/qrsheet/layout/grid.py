"""
网格版面 - 计算每个单元格的像素位置

页面固定 1056×816 px，3列 × 5行，单元格之间 8px 间距；
第 i 条记录放在第 i 个单元格（行优先），未使用的单元格留白。
"""

from __future__ import annotations

from dataclasses import dataclass

from ..config import LayoutConfig


@dataclass(frozen=True)
class CellBox:
    """单元格区域（像素）"""
    index: int
    column: int
    row: int
    x: float
    y: float
    width: float
    height: float


class GridLayout:
    """3×5 网格几何"""

    def __init__(self, layout: LayoutConfig | None = None):
        self.layout = layout or LayoutConfig()

    @property
    def capacity(self) -> int:
        return self.layout.capacity

    @property
    def track_width(self) -> float:
        """列轨道宽度（均分扣除间距后的宽度）"""
        cfg = self.layout
        return (cfg.width - cfg.gap * (cfg.columns - 1)) / cfg.columns

    @property
    def track_height(self) -> float:
        cfg = self.layout
        return (cfg.height - cfg.gap * (cfg.rows - 1)) / cfg.rows

    def cell_box(self, index: int) -> CellBox:
        """第 index 个单元格（0起，行优先）的记录框"""
        if not 0 <= index < self.capacity:
            raise IndexError(f"单元格越界: {index} (容量 {self.capacity})")
        cfg = self.layout
        column, row = index % cfg.columns, index // cfg.columns
        # 记录框固定尺寸，靠单元格左上角放置
        return CellBox(
            index=index,
            column=column,
            row=row,
            x=column * (self.track_width + cfg.gap),
            y=row * (self.track_height + cfg.gap),
            width=min(cfg.item_width, self.track_width),
            height=min(cfg.item_height, self.track_height),
        )

    def cells(self, count: int) -> list[CellBox]:
        """前 count 个单元格"""
        if count > self.capacity:
            raise ValueError(f"单页最多 {self.capacity} 条记录，实际 {count}")
        return [self.cell_box(i) for i in range(count)]
