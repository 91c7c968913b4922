"""
目标目录选择器

- StaticDirectoryPicker: 预先给定的目录（None 表示取消）
- PromptDirectoryPicker: 控制台提示输入，空输入或EOF视为取消
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path

from ..interfaces import IDirectoryPicker


class StaticDirectoryPicker(IDirectoryPicker):
    """固定目录"""

    def __init__(self, directory: str | Path | None):
        self.directory = Path(directory) if directory is not None else None

    async def choose_directory(self) -> Path | None:
        return self.directory


class PromptDirectoryPicker(IDirectoryPicker):
    """控制台提示选择目录"""

    def __init__(
        self,
        prompt: str = "保存图片的目录（留空取消）: ",
        input_func: Callable[[str], str] = input,
    ):
        self.prompt = prompt
        self.input_func = input_func

    async def choose_directory(self) -> Path | None:
        try:
            answer = await asyncio.to_thread(self.input_func, self.prompt)
        except (EOFError, KeyboardInterrupt):
            return None
        answer = answer.strip()
        if not answer:
            return None
        return Path(answer).expanduser()
