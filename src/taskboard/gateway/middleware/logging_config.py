"""structlog 配置模块

dev 模式：ConsoleRenderer 彩色输出
json 模式：单行 JSON，异常栈展开为结构化字段
两种模式都桥接到标准库 logging，uvicorn / aiosqlite 的日志走同一套处理器。
Logfire APM：LOGFIRE_SEND_TO_LOGFIRE 环境变量控制，false 时仅本地日志。
"""

import logging
import os

import structlog
from taskboard.core.config import get_log_format, get_log_level

# 请求日志已由 LoggingMiddleware 输出，关闭 uvicorn 自带的 access 日志
_QUIET_LOGGERS = ("uvicorn.access",)


def _renderer(log_format: str) -> list[structlog.types.Processor]:
    if log_format == "json":
        return [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    return [structlog.dev.ConsoleRenderer()]


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog 配置

    Args:
        log_format: "json" 或 "dev"，缺省读取 TASKBOARD_LOG_FORMAT
        log_level: 日志级别名，缺省读取 TASKBOARD_LOG_LEVEL
    """
    log_format = log_format or get_log_format()
    level = getattr(logging, (log_level or get_log_level()).upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *_renderer(log_format),
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logfire(app) -> None:
    """Logfire 可选初始化

    LOGFIRE_SEND_TO_LOGFIRE:
    - "true": 启用 Logfire APM（需要安装 observability extra 和 LOGFIRE_TOKEN）
    - 其他值（默认 "false"）: 仅本地日志
    """
    if os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower() != "true":
        return

    try:
        import logfire

        logfire.configure()
        logfire.instrument_fastapi(app)
    except Exception as e:
        # APM 不可用不影响请求处理
        structlog.get_logger().warning("logfire_init_failed", error=str(e))
