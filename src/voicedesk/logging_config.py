"""structlog 配置 -- CLI（serve / chat）与 echo gateway 共用

渲染模式与日志级别的优先级：显式参数 > 环境变量 > 默认值。
chat 模式下日志与对话输出共用一个终端，默认只输出 WARNING 以上并写到 stderr。
"""

import logging
import os
import sys
from typing import TextIO

import structlog

LOG_FORMATS = ("dev", "json")

# 每次后端调用都会打一条 INFO 的第三方 logger，非 DEBUG 时压到 WARNING
NOISY_LOGGERS = ("httpx", "httpcore")


def resolve_logging_options(
    log_format: str | None = None,
    level: str | None = None,
    default_level: str = "INFO",
) -> tuple[str, int]:
    """合并命令行参数与 VOICEDESK_LOG_FORMAT / VOICEDESK_LOG_LEVEL

    Returns:
        (渲染模式, logging 级别数值)，无法识别的取值回落到 dev / default_level
    """
    fmt = (log_format or os.environ.get("VOICEDESK_LOG_FORMAT") or "dev").lower()
    if fmt not in LOG_FORMATS:
        fmt = "dev"

    levels = logging.getLevelNamesMapping()
    name = (level or os.environ.get("VOICEDESK_LOG_LEVEL") or default_level).upper()
    return fmt, levels.get(name, levels.get(default_level.upper(), logging.INFO))


def setup_logging(
    log_format: str | None = None,
    level: str | None = None,
    default_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """初始化 structlog 与标准库 logging

    Args:
        log_format: "dev"（pretty print）或 "json"，None 时读环境变量
        level: 日志级别名，None 时读环境变量
        default_level: 两者都未提供时的级别
        stream: 输出流，默认 stderr
    """
    fmt, log_level = resolve_logging_options(log_format, level, default_level)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if fmt == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # uvicorn / httpx 的标准库日志走同一渲染器
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    noisy_level = log_level if log_level <= logging.DEBUG else max(log_level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)
