"""日志配置模块."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from bulk_sheet_editor.config.settings import settings


def setup_logger(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """配置日志系统.

    控制台只输出精简格式；配置了日志文件时另写一份到文件，
    相对路径写到输出目录下。

    Args:
        level: 日志级别，默认取配置
        log_file: 日志文件路径，默认取配置
    """
    level = (level or settings.log.level).upper()
    log_file = log_file or settings.log.log_file

    # 重复调用时先清掉已有的处理器
    logger.remove()
    logger.add(
        sys.stderr,
        format=settings.log.format,
        level=level,
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file)
        if not log_path.is_absolute():
            log_path = settings.output_dir / log_path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message}",
            level=level,
            rotation=settings.log.rotation,
            retention=settings.log.retention,
            encoding="utf-8",
        )

    logger.debug(f"日志系统已初始化，级别：{level}")
