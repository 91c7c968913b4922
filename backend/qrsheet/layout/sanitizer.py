"""
目录名清洗 - 工作表名称 → 文件系统安全的目录片段

规则（按顺序）：
1. 去掉首尾空白
2. 非法字符 < > : " / \\ | ? * 替换为 _
3. 连续空白替换为单个 _
4. 开头连续的 . 替换为 _
5. 结尾连续的 . 替换为 _

纯函数、确定性、幂等：sanitize(sanitize(x)) == sanitize(x)

测试要点：
- test_no_illegal_chars: 非法字符替换
- test_dot_runs: 首尾点号
- test_idempotent: 幂等
- test_fallback_when_missing: 缺省名称 → sheet-N
"""

from __future__ import annotations

import re

ILLEGAL_CHARS = '<>:"/\\|?*'

_ILLEGAL_RE = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE_RE = re.compile(r"\s+")
_LEADING_DOTS_RE = re.compile(r"^\.+")
_TRAILING_DOTS_RE = re.compile(r"\.+$")


def sanitize(name: str) -> str:
    """清洗工作表名称为目录片段"""
    result = name.strip()
    result = _ILLEGAL_RE.sub("_", result)
    result = _WHITESPACE_RE.sub("_", result)
    result = _LEADING_DOTS_RE.sub("_", result)
    result = _TRAILING_DOTS_RE.sub("_", result)
    return result


def fallback_directory(index: int) -> str:
    """无名称时的目录名（index 从0开始）"""
    return f"sheet-{index + 1}"


def sheet_directory_name(name: str | None, index: int) -> str:
    """工作表目录名：优先清洗后的名称，为空时退回 sheet-{index+1}"""
    if name is not None:
        cleaned = sanitize(name)
        if cleaned:
            return cleaned
    return fallback_directory(index)
