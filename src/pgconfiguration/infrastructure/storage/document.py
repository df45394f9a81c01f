"""
postgresql.json 文档编解码

文档结构：
```json
{
  "postgresqlconf": [
    {"param": "shared_buffers", "category": "Resource Usage / Memory", "value": "128MB"}
  ],
  "...": "其它顶层字段原样保留"
}
```
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from pgconfiguration.domain.models.param import Configuration, Param
from pgconfiguration.shared.constants import (
    PARAM_CATEGORY_FIELD,
    PARAM_NAME_FIELD,
    PARAM_VALUE_FIELD,
    POSTGRESQL_CONF_SECTION,
)
from pgconfiguration.shared.errors import ConfigurationFormatError

_PARAM_FIELDS = (PARAM_NAME_FIELD, PARAM_CATEGORY_FIELD, PARAM_VALUE_FIELD)


def _param_from_dict(item: object, *, label: str) -> Param:
    if not isinstance(item, dict):
        raise ConfigurationFormatError(f"{label} 必须是 JSON object")

    values: Dict[str, str] = {}
    for key in _PARAM_FIELDS:
        raw = item.get(key)
        if raw is None:
            raise ConfigurationFormatError(f"{label} 缺少字段 {key!r}")
        if not isinstance(raw, str):
            raise ConfigurationFormatError(f"{label}.{key} 必须是字符串：{raw!r}")
        values[key] = raw

    if not values[PARAM_NAME_FIELD]:
        raise ConfigurationFormatError(f"{label}.{PARAM_NAME_FIELD} 不能为空")

    extra = {k: v for k, v in item.items() if k not in _PARAM_FIELDS}
    return Param(
        name=values[PARAM_NAME_FIELD],
        category=values[PARAM_CATEGORY_FIELD],
        value=values[PARAM_VALUE_FIELD],
        extra=extra,
    )


def configuration_from_dict(data: object) -> Configuration:
    if not isinstance(data, dict):
        raise ConfigurationFormatError("配置文档根节点必须是 JSON object")

    raw_params = data.get(POSTGRESQL_CONF_SECTION)
    if raw_params is None:
        raise ConfigurationFormatError(f"配置文档缺少 {POSTGRESQL_CONF_SECTION} 字段")
    if not isinstance(raw_params, list):
        raise ConfigurationFormatError(f"{POSTGRESQL_CONF_SECTION} 必须是数组")

    params: List[Param] = [
        _param_from_dict(item, label=f"{POSTGRESQL_CONF_SECTION}[{idx}]")
        for idx, item in enumerate(raw_params)
    ]
    sections = {k: v for k, v in data.items() if k != POSTGRESQL_CONF_SECTION}
    return Configuration(params=params, sections=sections)


def configuration_to_dict(configuration: Configuration) -> Dict[str, Any]:
    params = [
        {
            PARAM_NAME_FIELD: param.name,
            PARAM_CATEGORY_FIELD: param.category,
            PARAM_VALUE_FIELD: param.value,
            **param.extra,
        }
        for param in configuration.params
    ]
    return {POSTGRESQL_CONF_SECTION: params, **configuration.sections}


def loads_configuration(text: str) -> Configuration:
    """
    Parse a postgresql.json document.

    Raises:
        ConfigurationFormatError: invalid JSON or unexpected structure.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationFormatError(
            f"JSON 格式错误（第 {e.lineno} 行第 {e.colno} 列）：{e.msg}"
        ) from e
    return configuration_from_dict(data)


def dumps_configuration(configuration: Configuration) -> str:
    """
    Serialize to 2-space indented JSON, keeping non-ASCII text readable.

    Values holding lone surrogates (valid `\\ud800` escapes in the source document)
    cannot be encoded as UTF-8, so such documents are written with `\\uXXXX` escapes.
    """
    data = configuration_to_dict(configuration)
    text = json.dumps(data, ensure_ascii=False, indent=2) + "\n"
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        text = json.dumps(data, ensure_ascii=True, indent=2) + "\n"
    return text
