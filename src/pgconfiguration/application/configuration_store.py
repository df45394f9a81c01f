"""
配置存储（服务核心）

持有加载后的 Configuration 与两个索引，提供读取/修改接口；
每次修改都会同步、原子地把完整配置写回 postgresql.json 后才返回。

线程安全说明：索引与参数值的修改没有加锁，并发修改需要调用方自行串行化；
只有落盘步骤由 AtomicFileWriter 内部的锁保护。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Set, Tuple

from pgconfiguration.domain.models.param import Configuration, Param
from pgconfiguration.domain.services.param_index import ParamIndex, build_param_index
from pgconfiguration.infrastructure.exports.postgresql_conf import (
    read_header,
    render_key_value_text,
)
from pgconfiguration.infrastructure.storage.atomic_writer import AtomicFileWriter
from pgconfiguration.infrastructure.storage.configuration_loader import (
    ConfigurationLoader,
)
from pgconfiguration.infrastructure.storage.document import dumps_configuration
from pgconfiguration.shared.constants import POSTGRESQL_JSON

logger = logging.getLogger(__name__)


class ConfigurationStore:
    """
    In-memory postgresql.conf parameters with atomic durable persistence.

    The constructor loads (or bootstraps) the document and builds the indexes; a
    failing load raises and leaves no half-initialized store behind.
    """

    def __init__(
        self,
        data_dir: Path,
        *,
        loader: Optional[ConfigurationLoader] = None,
    ):
        self._data_dir = Path(data_dir)
        if loader is None:
            loader = ConfigurationLoader(AtomicFileWriter())
        # 首次运行写入与后续持久化共用同一个写入器（同一把锁）
        self._writer = loader.writer

        self._configuration: Configuration = loader.load(self._data_dir)
        self._index: ParamIndex = build_param_index(self._configuration.params)

        logger.info(
            f"已加载 {len(self._index.by_name)} 个参数，"
            f"{len(self._index.by_category)} 个分类（{self.postgresql_json}）"
        )

    # ==================== 路径 ====================

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def postgresql_json(self) -> Path:
        return self._data_dir / POSTGRESQL_JSON

    def get_data_dir_path(self) -> str:
        """数据目录的绝对路径"""
        return str(self._data_dir.absolute())

    # ==================== 读取 ====================

    def get_param(self, name: Optional[str]) -> Optional[Param]:
        """
        按名称获取参数

        Returns:
            参数快照；name 为 None 或参数不存在时返回 None
        """
        if name is None:
            return None
        slot = self._index.by_name.get(name)
        if slot is None:
            return None
        return self._configuration.params[slot].snapshot()

    def get_param_names(self) -> Set[str]:
        return set(self._index.by_name)

    def get_categories(self) -> Set[str]:
        return set(self._index.by_category)

    def get_param_names_by_category(self, category: Optional[str]) -> Optional[List[str]]:
        """
        获取某个分类下的参数名（按字典序排序）

        Returns:
            排序后的参数名列表；category 为 None 或分类不存在时返回 None
        """
        if category is None:
            return None
        slots = self._index.by_category.get(category)
        if slots is None:
            return None
        return sorted({self._configuration.params[slot].name for slot in slots})

    def get_params(self) -> List[Param]:
        """所有已索引的参数（文档顺序）"""
        return [
            self._configuration.params[slot].snapshot()
            for slot in sorted(self._index.by_name.values())
        ]

    def _iter_params_by_category(self) -> Iterator[Tuple[str, List[Param]]]:
        for category, slots in self._index.by_category.items():
            yield category, [self._configuration.params[slot] for slot in slots]

    # ==================== 修改 ====================

    def set_param(self, name: Optional[str], value: str) -> Optional[Param]:
        """
        修改参数值并立即持久化

        Args:
            name: 参数名
            value: 新值（不做格式校验，任意字符串均可）

        Returns:
            修改前的参数快照；参数不存在时返回 None（不修改、不落盘）

        Raises:
            TypeError: 参数存在但 value 不是字符串
            PersistenceError: 落盘失败；此时内存中的值已经修改，可调用 persist() 重试
        """
        if name is None:
            return None
        slot = self._index.by_name.get(name)
        if slot is None:
            return None

        if not isinstance(value, str):
            raise TypeError(f"参数值必须是字符串：{value!r}")

        param = self._configuration.params[slot]
        previous = param.snapshot()
        param.value = value
        logger.info(f"参数 {name} 已修改: {previous.value!r} -> {value!r}")

        self.persist()
        return previous

    def persist(self) -> None:
        """
        把当前内存中的完整配置原子写入 postgresql.json

        Raises:
            PersistenceError: 写入失败，原文件保持不变
        """
        self._writer.write_text(
            self.postgresql_json, dumps_configuration(self._configuration)
        )

    # ==================== 导出 ====================

    def to_key_value_text(self) -> str:
        """渲染为 postgresql.conf（key = value）文本，无持久化副作用"""
        return render_key_value_text(self._iter_params_by_category(), header=read_header())
