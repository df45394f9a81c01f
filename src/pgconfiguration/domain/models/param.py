"""
配置领域模型

- Param：postgresql.conf 中的一个参数（名称、分类、字符串值）
- Configuration：参数数组 + 文档中其它顶层字段（原样透传，不做索引）
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List


@dataclass(slots=True)
class Param:
    """
    A single postgresql.conf parameter.

    `extra` holds any other fields of the JSON parameter object so they survive a
    load/persist round trip untouched.
    """

    name: str
    category: str
    value: str
    extra: Dict[str, Any] = field(default_factory=dict)

    def snapshot(self) -> "Param":
        return replace(self, extra=dict(self.extra))

    def to_dict(self) -> Dict[str, Any]:
        return {"param": self.name, "category": self.category, "value": self.value}


@dataclass(slots=True)
class Configuration:
    """Parameter arena (document order) plus pass-through top-level sections."""

    params: List[Param] = field(default_factory=list)
    sections: Dict[str, Any] = field(default_factory=dict)
