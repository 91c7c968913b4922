"""
日志初始化 - 按 LoggingConfig 配置根日志器

重复调用不会叠加 handler。
"""

from __future__ import annotations

import logging
from pathlib import Path

from .runtime_config import LoggingConfig

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_HANDLER_MARK = "_qrsheet_handler"


def setup_logging(cfg: LoggingConfig | None = None, level: str | None = None) -> None:
    """配置控制台（及可选文件）日志"""
    cfg = cfg or LoggingConfig()
    root = logging.getLogger()
    root.setLevel((level or cfg.log_level).upper())

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if cfg.log_to_file:
        log_path = Path(cfg.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARK, True)
        root.addHandler(handler)
