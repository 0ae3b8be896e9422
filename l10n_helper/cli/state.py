# l10n_helper/cli/state.py
"""定义 CLI 应用的共享状态对象。"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from l10n_helper.context import HelperContext

if TYPE_CHECKING:
    from l10n_helper.config import L10nHelperConfig
    from l10n_helper.types import LoadReport


class State:
    """通过 Typer 上下文在命令之间传递配置与懒加载的扫描上下文。"""

    def __init__(self, config: "L10nHelperConfig") -> None:
        self.config = config
        self._context: HelperContext | None = None
        self.report: "LoadReport | None" = None

    def context(self) -> HelperContext:
        """返回已加载翻译缓存的上下文；首次调用时执行一次重载。"""
        if self._context is None:
            self._context = HelperContext(config=self.config)
            self.report = asyncio.run(self._context.reload())
        return self._context
