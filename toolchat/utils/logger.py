"""
日志配置模块。

使用 loguru 提供统一的日志管理：
- 控制台（stderr）始终输出，级别取自 LOG_LEVEL / config.yaml 的 log_level
- 配置了 LOG_FILE / log_file 时，额外写入按天轮转的文件日志
"""

import sys
from typing import Optional

from loguru import logger

from toolchat.config import load_config

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logger(level: str = "INFO", log_file: Optional[str] = None) -> list[int]:
    """重新配置 loguru 的输出目标，返回新增 handler 的 id 列表。"""
    level = (level or "INFO").upper()
    logger.remove()
    handler_ids = [logger.add(sys.stderr, level=level, format=LOG_FORMAT)]
    if log_file:
        handler_ids.append(
            logger.add(
                log_file,
                level=level,
                format=LOG_FORMAT,
                rotation="1 day",
                retention="7 days",
                encoding="utf-8",
                enqueue=True,
            )
        )
    return handler_ids


_cfg = load_config()
configure_logger(_cfg.log_level, _cfg.log_file)

__all__ = ["logger", "configure_logger"]
