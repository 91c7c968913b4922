"""
运行期配置 - 读取 config/qrsheet_runtime.yaml

职责：
- 加载版面/超时/并发/打印/日志等运行参数
- 提供环境变量覆盖机制（前缀 QRSHEET_，嵌套分隔符 __）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

DEFAULT_CONFIG_PATH = Path("config/qrsheet_runtime.yaml")

_SECTIONS = ("layout", "timeouts", "concurrency", "columns", "printing", "logging")


class LayoutConfig(BaseModel):
    """版面配置（11in × 8.5in @ 96 DPI，3列 × 5行）"""

    width: int = 1056
    height: int = 816
    columns: int = 3
    rows: int = 5
    gap: int = 8
    item_width: int = 346
    item_height: int = 147
    padding: int = 4
    corner_radius: int = 8
    qr_size: int = 100
    code_font_size: float = 12.8
    label_font_size: float = 14.4
    label_gap: int = 8
    font_family: str = "Arial, sans-serif"

    @property
    def capacity(self) -> int:
        return self.columns * self.rows


class TimeoutConfig(BaseModel):
    """超时配置（秒，0 表示不限时）"""

    markup_sec: float = 10
    rasterize_sec: float = 60
    persist_sec: float = 30
    print_sec: float = 120


class ConcurrencyConfig(BaseModel):
    """并发配置"""

    max_pages_in_flight: int = Field(1, ge=1)


class ColumnConfig(BaseModel):
    """表格列名映射"""

    code: str = "UPC"
    label: str = "DESCRIPTION"


class PrintingConfig(BaseModel):
    """系统打印配置"""

    command: str = "lp"
    printer: str | None = None


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: str = "logs/qrsheet.log"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    base_dir: Path = Path(".")

    # 各子配置
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)
    columns: ColumnConfig = Field(default_factory=ColumnConfig)
    printing: PrintingConfig = Field(default_factory=PrintingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "QRSHEET_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """环境变量优先于YAML（逐键覆盖）"""
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置（文件不存在时使用默认值）"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        # 各节以dict传入，环境变量才能按键合并覆盖
        config = cls(
            base_dir=path.parent,
            **{key: cls._extract(runtime_opts, key) for key in _SECTIONS},
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置（叶子可以是值，也可以是 {default: 值}）"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """日志文件相对路径基于配置文件所在目录"""
        log_file = Path(self.logging.log_file)
        if not log_file.is_absolute():
            self.logging.log_file = str((base_dir / log_file).resolve())

    @staticmethod
    def timeout_or_none(seconds: float) -> float | None:
        """0 或负数表示不限时"""
        return seconds if seconds and seconds > 0 else None


# 全局配置实例
_config: RuntimeConfig | None = None


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
