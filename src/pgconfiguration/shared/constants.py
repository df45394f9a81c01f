"""
全局常量定义

存储项目级别的常量（文件名、内置资源名、环境变量），供所有模块使用
"""

import os
from pathlib import Path


def get_path_from_env(env_var: str, default: Path) -> Path:
    """
    从环境变量获取路径，如果未设置则使用默认值

    Args:
        env_var: 环境变量名称
        default: 默认路径

    Returns:
        Path: 配置的路径
    """
    env_value = os.getenv(env_var)
    if env_value:
        return Path(env_value)
    return default


# 服务配置文件路径（YAML）
CONFIG_FILE_ENV = "PGCONFIGURATION_CONFIG_FILE"
CONFIG_FILE = get_path_from_env(CONFIG_FILE_ENV, Path("pgconfiguration.yaml"))

# 数据目录（存放 postgresql.json），优先级：命令行 > 环境变量 > config.yaml > 默认值
DATA_DIR_ENV = "PGCONFIGURATION_DATA_DIR"
DEFAULT_DATA_DIR = Path("pgdata")

# 数据目录下的配置文档
POSTGRESQL_JSON = "postgresql.json"

# 文档中被索引的参数数组字段；参数对象字段名
POSTGRESQL_CONF_SECTION = "postgresqlconf"
PARAM_NAME_FIELD = "param"
PARAM_CATEGORY_FIELD = "category"
PARAM_VALUE_FIELD = "value"

# 内置资源（随包发布）
RESOURCES_PACKAGE = "pgconfiguration.resources"
PGCONFIGURATION_JSON_RESOURCE = "pgconfiguration.json"
POSTGRESQL_CONF_HEADER_RESOURCE = "postgresql.conf.header"

# HTTP 服务默认监听地址
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "INFO"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_temp_persist_filename(filename: str) -> str:
    """原子写入时使用的临时文件名（与目标文件同目录）。"""
    return f".{filename}.tmp"
