"""
服务配置管理器模块

读取服务自身的 YAML 配置（数据目录、监听地址、日志级别等），按节（section）组织。
注意：这里不是 postgresql.json，后者由 ConfigurationStore 管理。

配置文件结构示例：
```yaml
server:
  data_dir: ./pgdata
  host: 127.0.0.1
  port: 8080
  log_level: INFO
```
"""

from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from pgconfiguration.shared import constants
from pgconfiguration.shared.errors import ServerSettingsError

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    YAML 服务配置读取器

    配置文件不存在或为空时视为“全部使用默认值”。
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Args:
            config_path: 配置文件路径，默认为 PGCONFIGURATION_CONFIG_FILE 或 ./pgconfiguration.yaml
        """
        self.config_path = Path(config_path) if config_path else constants.CONFIG_FILE

    def _load_all_config(self) -> Dict[str, Any]:
        """
        加载完整的配置文件

        Raises:
            ServerSettingsError: 文件无法读取、YAML 格式错误或根节点不是 mapping
        """
        if not self.config_path.exists():
            logger.debug(f"配置文件不存在，使用默认配置: {self.config_path}")
            return {}

        try:
            raw_text = self.config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ServerSettingsError(f"读取配置文件失败：{self.config_path}（{e}）") from e

        try:
            config_data = yaml.safe_load(raw_text)
        except yaml.YAMLError as e:
            raise ServerSettingsError(f"配置文件 YAML 格式错误：{e}") from e

        if config_data is None:
            return {}

        if not isinstance(config_data, dict):
            raise ServerSettingsError("配置文件根节点必须是 YAML mapping（dict）")

        return config_data

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        获取配置的某个节（section），不存在返回空字典

        Raises:
            ServerSettingsError: 配置文件非法，或该节不是 mapping
        """
        data = self._load_all_config().get(section)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ServerSettingsError(f"配置节 {section} 必须是 mapping（dict）")
        return data


@lru_cache(maxsize=1)
def get_config_manager() -> ConfigManager:
    """
    全局 ConfigManager（按 constants.CONFIG_FILE 构建）。

    Note:
        测试中替换 CONFIG_FILE 后需调用 `get_config_manager.cache_clear()`。
    """
    return ConfigManager(constants.CONFIG_FILE)
