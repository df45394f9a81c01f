"""
服务运行配置（config.yaml 的 server 节）

数据目录优先级：命令行参数 > 环境变量 PGCONFIGURATION_DATA_DIR > config.yaml > 默认值 ./pgdata
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from pgconfiguration.infrastructure.config.config_manager import (
    ConfigManager,
    get_config_manager,
)
from pgconfiguration.shared.constants import (
    DATA_DIR_ENV,
    DEFAULT_DATA_DIR,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    LOG_LEVELS,
)
from pgconfiguration.shared.errors import ServerSettingsError

SERVER_SECTION = "server"


def _norm_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _validate_port(value: object) -> int:
    if isinstance(value, bool):
        raise ServerSettingsError("server.port 必须是整数（不能是 bool）")
    try:
        port = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise ServerSettingsError(f"server.port 不是合法整数：{value!r}") from e
    if not 1 <= port <= 65535:
        raise ServerSettingsError(f"server.port 超出范围（1-65535）：{port}")
    return port


@dataclass(frozen=True)
class ServerSettings:
    data_dir: Path = DEFAULT_DATA_DIR
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_section(cls, section: Mapping[str, Any]) -> "ServerSettings":
        data_dir = _norm_str(section.get("data_dir"))
        host = _norm_str(section.get("host")) or DEFAULT_HOST
        port = _validate_port(section.get("port", DEFAULT_PORT))
        log_level = (_norm_str(section.get("log_level")) or DEFAULT_LOG_LEVEL).upper()

        if log_level not in LOG_LEVELS:
            raise ServerSettingsError(
                f"server.log_level 不支持：{log_level!r}（可选：{', '.join(LOG_LEVELS)}）"
            )

        return cls(
            data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
            host=host,
            port=port,
            log_level=log_level,
        )


def load_server_settings(
    *,
    data_dir: Optional[Path] = None,
    config_manager: Optional[ConfigManager] = None,
) -> ServerSettings:
    """
    合并 config.yaml、环境变量与命令行参数，得到最终运行配置。

    Raises:
        ServerSettingsError: 配置文件或配置值非法
    """
    manager = config_manager or get_config_manager()
    settings = ServerSettings.from_section(manager.get_section(SERVER_SECTION))

    env_data_dir = os.getenv(DATA_DIR_ENV)
    if env_data_dir:
        settings = replace(settings, data_dir=Path(env_data_dir))

    if data_dir is not None:
        settings = replace(settings, data_dir=Path(data_dir))

    return settings
