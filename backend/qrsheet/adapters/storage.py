"""
文件系统持久化 - 将位图写入 {root}/{sheet_dir}/{filename}

职责：
1. 目录不存在时自动创建
2. 支持原始PNG字节或 data:image/png;base64, 字符串
3. 失败时抛出 PersistenceError（由协调器记录并继续）
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from pathlib import Path

from ..interfaces import IPersistenceSink, PersistenceError

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/png;base64,"


class FileSystemSink(IPersistenceSink):
    """本地文件系统写入"""

    async def write_image(self, directory: Path, filename: str, payload: bytes | str) -> Path:
        data = self._decode_payload(payload)
        return await asyncio.to_thread(self._write, Path(directory), filename, data)

    @staticmethod
    def _decode_payload(payload: bytes | str) -> bytes:
        if isinstance(payload, bytes):
            return payload
        encoded = payload.removeprefix(DATA_URL_PREFIX)
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise PersistenceError(f"图片数据解码失败: {e}") from e

    @staticmethod
    def _write(directory: Path, filename: str, data: bytes) -> Path:
        path = directory / filename
        try:
            directory.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise PersistenceError(f"写入失败: {path}: {e}") from e
        logger.info(f"已保存图片: {path}")
        return path
