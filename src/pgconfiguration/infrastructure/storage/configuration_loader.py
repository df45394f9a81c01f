"""
配置加载器

- 数据目录下已存在 postgresql.json：读取并解析
- 不存在：解析内置的 pgconfiguration.json，并立即原子写入数据目录（仅首次运行发生）

任何失败都是致命错误，调用方应中止启动，不存在“降级模式”。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from pgconfiguration.domain.models.param import Configuration
from pgconfiguration.infrastructure.resources import read_resource_text
from pgconfiguration.infrastructure.storage.atomic_writer import AtomicFileWriter
from pgconfiguration.infrastructure.storage.document import (
    dumps_configuration,
    loads_configuration,
)
from pgconfiguration.shared.constants import (
    PGCONFIGURATION_JSON_RESOURCE,
    POSTGRESQL_JSON,
)
from pgconfiguration.shared.errors import (
    ConfigurationBootstrapError,
    ConfigurationFormatError,
    ConfigurationReadError,
    PersistenceError,
)

logger = logging.getLogger(__name__)


class ConfigurationLoader:
    def __init__(
        self,
        writer: AtomicFileWriter,
        *,
        default_reader: Optional[Callable[[], str]] = None,
    ):
        """
        Args:
            writer: 首次运行写入默认配置时使用的原子写入器（与 store 共用同一把锁）
            default_reader: 读取内置默认文档的函数，默认读取包内资源
        """
        self.writer = writer
        self.default_reader = default_reader or (
            lambda: read_resource_text(PGCONFIGURATION_JSON_RESOURCE)
        )

    def load(self, data_dir: Path) -> Configuration:
        """
        Load the configuration for `data_dir`, bootstrapping it from the bundled
        default on first run.

        Raises:
            ConfigurationFormatError: malformed document (on disk or bundled).
            ConfigurationReadError: unreadable file or missing bundled resource.
            ConfigurationBootstrapError: the first-run file could not be written.
        """
        postgresql_json = Path(data_dir) / POSTGRESQL_JSON
        if postgresql_json.exists():
            return self._load_file(postgresql_json)

        configuration = self._load_default()

        logger.info(f"生成新的 {POSTGRESQL_JSON} 文件: {postgresql_json}")
        try:
            postgresql_json.parent.mkdir(parents=True, exist_ok=True)
            self.writer.write_text(postgresql_json, dumps_configuration(configuration))
        except (OSError, PersistenceError) as e:
            error = f"写入新的 {POSTGRESQL_JSON} 文件失败：{postgresql_json}"
            logger.error(error, exc_info=True)
            raise ConfigurationBootstrapError(error) from e

        return configuration

    def _load_file(self, path: Path) -> Configuration:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            error = f"读取 {POSTGRESQL_JSON} 文件失败：{path}"
            logger.error(error, exc_info=True)
            raise ConfigurationReadError(error) from e

        try:
            return loads_configuration(text)
        except ConfigurationFormatError as e:
            error = f"{POSTGRESQL_JSON} 格式错误（{path}）：{e}"
            logger.error(error)
            raise ConfigurationFormatError(error) from e

    def _load_default(self) -> Configuration:
        try:
            text = self.default_reader()
        except (OSError, UnicodeDecodeError) as e:
            error = f"读取内置资源 {PGCONFIGURATION_JSON_RESOURCE} 失败"
            logger.error(error, exc_info=True)
            raise ConfigurationReadError(error) from e

        try:
            return loads_configuration(text)
        except ConfigurationFormatError as e:
            error = f"内置资源 {PGCONFIGURATION_JSON_RESOURCE} 格式错误：{e}"
            logger.error(error)
            raise ConfigurationFormatError(error) from e
