"""
配置层 - 加载运行期配置与日志初始化

职责：
- 加载 config/qrsheet_runtime.yaml（运行期参数）
- 提供类型安全的配置访问接口
- 初始化日志
"""

from .logging_setup import setup_logging
from .runtime_config import (
    ColumnConfig,
    ConcurrencyConfig,
    LayoutConfig,
    LoggingConfig,
    PrintingConfig,
    RuntimeConfig,
    TimeoutConfig,
    get_config,
    reload_config,
)

__all__ = [
    "RuntimeConfig",
    "LayoutConfig",
    "TimeoutConfig",
    "ConcurrencyConfig",
    "ColumnConfig",
    "PrintingConfig",
    "LoggingConfig",
    "get_config",
    "reload_config",
    "setup_logging",
]
