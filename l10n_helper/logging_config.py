# l10n_helper/logging_config.py
"""
集中配置日志系统：structlog ⇄ 标准 logging，console 模式由 Rich 渲染。

- console：单行、带配色的人类友好输出（本地时间），适合编辑器输出面板。
- json   ：结构化日志（ISO-8601 UTC），便于宿主收集。
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, Literal

import structlog
from rich.console import Console
from rich.text import Text
from structlog.typing import Processor

if TYPE_CHECKING:
    from l10n_helper.config import L10nHelperConfig

APP_LOGGER_NAME = "l10n_helper"


class ConsoleLineRenderer:
    """
    structlog 处理器：将事件渲染为一行 Rich 文本。

    格式：`时间 级别 [logger] 消息 key=value ...`，级别标签等宽以保证对齐。
    """

    _LEVEL_STYLES: dict[str, tuple[str, str]] = {
        "debug": ("cyan", "DEBUG"),
        "info": ("green", "INFO "),
        "warning": ("yellow", "WARN "),
        "error": ("bold red", "ERROR"),
        "critical": ("magenta", "CRIT "),
    }

    def __init__(
        self,
        *,
        show_timestamp: bool = True,
        show_logger_name: bool = True,
        value_truncate_at: int = 120,
    ) -> None:
        self._console = Console()
        self._show_timestamp = show_timestamp
        self._show_logger_name = show_logger_name
        self._value_truncate_at = value_truncate_at

    def __call__(
        self, logger: Any, name: str, event_dict: MutableMapping[str, Any]
    ) -> str:
        event = str(event_dict.pop("event", "")).strip()
        if not event:
            return ""

        timestamp = event_dict.pop("timestamp", "")
        level = str(event_dict.pop("level", "info")).lower()
        logger_name = event_dict.pop("logger", None)
        exception = event_dict.pop("exception", None)
        event_dict.pop("_record", None)
        event_dict.pop("_from_structlog", None)

        style, label = self._LEVEL_STYLES.get(level, ("dim", level.upper()))
        line = Text()
        if self._show_timestamp and timestamp:
            line.append(f"{timestamp} ", style="dim")
        line.append(label, style=style)
        if self._show_logger_name and logger_name:
            line.append(f" [{logger_name}]", style="cyan dim")
        line.append(f" {event}")
        for key, value in sorted(event_dict.items()):
            line.append(f" {key}=", style="dim")
            line.append(self._format_value(value), style="bright_white")

        with self._console.capture() as capture:
            self._console.print(line, soft_wrap=True)
        rendered = capture.get().rstrip()
        if exception:
            rendered = f"{rendered}\n{exception}"
        return rendered

    def _format_value(self, value: Any) -> str:
        text = value if isinstance(value, str) else repr(value)
        if len(text) > self._value_truncate_at:
            text = text[: self._value_truncate_at] + "…"
        return text


def setup_logging(
    *,
    log_level: str = "INFO",
    log_format: Literal["json", "console"] = "console",
    show_timestamp: bool = True,
    show_logger_name: bool = True,
    root_level: str | None = None,
) -> None:
    """
    配置全局 structlog 日志系统。

    Args:
        log_level: l10n_helper logger 的最低级别。
        log_format: 'console'（Rich 单行输出）或 'json'。
        show_timestamp: console 模式下是否显示时间。
        show_logger_name: console 模式下是否显示 logger 名称。
        root_level: 根 logger 级别；默认 WARNING 以降低第三方噪声。
    """
    timestamper = (
        structlog.processors.TimeStamper(fmt="iso", utc=True)
        if log_format == "json"
        else structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False)
    )
    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        timestamper,
    ]

    structlog.configure(
        processors=[
            *shared,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = ConsoleLineRenderer(
            show_timestamp=show_timestamp, show_logger_name=show_logger_name
        )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared,
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel((root_level or "WARNING").upper())

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(log_level.upper())
    app_logger.propagate = True

    structlog.get_logger("l10n_helper.logging_config").debug(
        "日志系统已配置完成。", log_format=log_format, app_log_level=log_level.upper()
    )


def setup_logging_from_config(cfg: "L10nHelperConfig") -> None:
    """根据 L10nHelperConfig 一键初始化日志系统。"""
    setup_logging(log_level=cfg.logging.level, log_format=cfg.logging.format)
