import logging
from typing import Union

from pgconfiguration.shared.constants import LOG_LEVELS

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# 第三方库日志默认更安静，避免淹没配置变更日志
_NOISY_LOGGERS = ("uvicorn.access",)


def normalize_log_level(level: Union[str, int]) -> int:
    """
    将日志级别统一转换为 logging 常量

    Raises:
        ValueError: 未知的日志级别名称
    """
    if isinstance(level, int):
        return level

    name = str(level or "").strip().upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"未知的日志级别：{level!r}（可选：{', '.join(LOG_LEVELS)}）")
    return getattr(logging, name)


def set_global_log_level(level: Union[str, int]) -> None:
    """
    设置全局日志级别

    Args:
        level: 日志级别，可以是字符串('DEBUG', 'INFO'等)或logging模块的级别常量
    """
    level = normalize_log_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # 如果没有处理器，添加一个默认的控制台处理器
    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(console_handler)

    for handler in root_logger.handlers:
        handler.setLevel(level)

    if level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))
