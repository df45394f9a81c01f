"""
postgresql.conf 文本导出

输出格式：
- 头部（内置 postgresql.conf.header，每行以换行结尾；读取失败则省略）
- 每个分类：一个空行、`# <分类>`，随后每个参数一行 `<name> = <value>`
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from pgconfiguration.domain.models.param import Param
from pgconfiguration.infrastructure.resources import read_resource_text
from pgconfiguration.shared.constants import POSTGRESQL_CONF_HEADER_RESOURCE

logger = logging.getLogger(__name__)


def read_header() -> Optional[str]:
    """
    读取内置头部，失败返回 None（记录警告，不中断导出）。
    """
    try:
        return read_resource_text(POSTGRESQL_CONF_HEADER_RESOURCE)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(
            f"无法读取内置资源 {POSTGRESQL_CONF_HEADER_RESOURCE}，导出将不包含头部: {str(e)}"
        )
        return None


def render_key_value_text(
    params_by_category: Iterable[Tuple[str, Iterable[Param]]],
    *,
    header: Optional[str] = None,
) -> str:
    lines: list[str] = []

    if header:
        lines.extend(line + "\n" for line in header.splitlines())

    for category, params in params_by_category:
        lines.append(f"\n# {category}\n")
        for param in params:
            lines.append(f"{param.name} = {param.value}\n")

    return "".join(lines)
