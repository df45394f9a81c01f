"""
参数索引

对 Configuration.params（参数“仓库”）做一次线性扫描，建立两个索引：
- by_name：参数名 -> 仓库下标
- by_category：分类 -> 仓库下标列表（保持文档中的出现顺序）

索引只保存下标，不复制 Param；通过任一索引修改值都落在同一个对象上。
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, List, Sequence

from pgconfiguration.domain.models.param import Param

logger = logging.getLogger(__name__)


@dataclass
class ParamIndex:
    by_name: Dict[str, int] = field(default_factory=dict)
    by_category: Dict[str, List[int]] = field(default_factory=dict)
    duplicates: List[str] = field(default_factory=list)


def build_param_index(params: Sequence[Param]) -> ParamIndex:
    """
    Build the name and category indexes over `params`.

    A repeated name keeps the last occurrence: the shadowed slot is dropped from its
    category bucket so every indexed name lives in exactly one bucket. Repeats are
    reported in `ParamIndex.duplicates` and logged, never raised.
    """
    index = ParamIndex()

    for slot, param in enumerate(params):
        previous = index.by_name.get(param.name)
        if previous is not None:
            shadowed = params[previous]
            # 清空的分类先保留原位置，扫描结束后再剔除，保证分类按首次出现顺序排列
            index.by_category[shadowed.category].remove(previous)
            index.duplicates.append(param.name)
            logger.warning(f"参数 {param.name} 重复出现，使用最后一次出现的定义")

        index.by_name[param.name] = slot
        index.by_category.setdefault(param.category, []).append(slot)

    index.by_category = {
        category: slots for category, slots in index.by_category.items() if slots
    }
    return index
