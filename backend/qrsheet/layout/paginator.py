"""
分页器 - 将有序记录切分为固定容量的页

不变式：
- 页数 = ceil(N / capacity)，N=0 时为0页
- 第k页(1起)包含 [(k-1)*capacity, k*capacity) 的记录
- 按页顺序拼接可还原原始列表（不重排、不去重）
- 最后一页可不满，但工作表非空时绝不为空
"""

from __future__ import annotations

from collections.abc import Sequence

from ..models import Item, Page

PAGE_CAPACITY = 15


def page_count(item_count: int, capacity: int = PAGE_CAPACITY) -> int:
    """计算页数"""
    if capacity <= 0:
        raise ValueError(f"capacity必须为正数: {capacity}")
    return -(-item_count // capacity)


def paginate(
    items: Sequence[Item],
    *,
    sheet_index: int = 0,
    capacity: int = PAGE_CAPACITY,
) -> list[Page]:
    """切分为页（页码按位置分配，从1开始）"""
    total = page_count(len(items), capacity)
    return [
        Page(
            sheet_index=sheet_index,
            page_number=k + 1,
            items=tuple(items[k * capacity:(k + 1) * capacity]),
        )
        for k in range(total)
    ]
