"""
记录模型 - Item（单条记录）与 Sheet（命名的有序记录集合）

Item 的身份由其在工作表中的位置决定，而非取值；
核心流程只使用 code / label 两个字段，其余列原样透传。
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_CODE_COLUMN = "UPC"
DEFAULT_LABEL_COLUMN = "DESCRIPTION"


class Item(BaseModel):
    """单条记录（只读）"""
    code: str = Field("", description="编码字段(UPC)，二维码内容")
    label: str = Field("", description="标签字段(DESCRIPTION)")
    fields: dict[str, str] = Field(default_factory=dict, description="透传的其余列")

    model_config = {"frozen": True}

    @classmethod
    def from_row(
        cls,
        row: Mapping[str, Any],
        code_column: str = DEFAULT_CODE_COLUMN,
        label_column: str = DEFAULT_LABEL_COLUMN,
    ) -> Item:
        """从表格行（列名→值）构建记录"""
        values = {str(k): _cell_text(v) for k, v in row.items()}
        return cls(
            code=values.pop(code_column, ""),
            label=values.pop(label_column, ""),
            fields=values,
        )


class Sheet(BaseModel):
    """工作表：名称（可缺省）+ 有序记录"""
    name: str | None = None
    items: list[Item] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def directory_name(self, index: int) -> str:
        """导出目录名（清洗后的名称，缺省时 sheet-{index+1}）"""
        from ..layout.sanitizer import sheet_directory_name

        return sheet_directory_name(self.name, index)

    def __len__(self) -> int:
        return len(self.items)


def _cell_text(value: Any) -> str:
    """单元格值转文本（整数值浮点数去掉 .0）"""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
