# l10n_helper/context.py
"""
HelperContext：封装扫描所需的全部依赖（配置、翻译缓存、规则目录）。

所有状态都由显式传递的上下文对象持有，没有模块级全局缓存，
因此同一进程内可以存在多个互不干扰的实例。
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from l10n_helper.composer import anchor_offset, compose
from l10n_helper.config import L10nHelperConfig
from l10n_helper.document import LineIndex
from l10n_helper.exceptions import WindowOverflowError
from l10n_helper.extractor import scan
from l10n_helper.patterns import PatternCatalog
from l10n_helper.store import TranslationStore
from l10n_helper.types import Annotation, ExtractionRule, LoadReport

logger = structlog.get_logger(__name__)


@dataclass
class HelperContext:
    """一个“工具箱”对象，供调度器与 CLI 共享。"""

    config: L10nHelperConfig
    store: TranslationStore = field(default_factory=TranslationStore)
    catalog: PatternCatalog | None = None

    def __post_init__(self) -> None:
        if self.catalog is None:
            self.catalog = PatternCatalog(maxsize=self.config.pattern_cache_size)

    def rules(self) -> tuple[ExtractionRule, ...]:
        assert self.catalog is not None
        return self.catalog.rules_for(self.config)

    async def reload(self) -> LoadReport:
        """按当前配置重新加载翻译缓存。"""
        return await self.store.reload(
            self.config.resource_path,
            self.config.preferred_locale,
            self.config.resource_extension,
        )

    def annotate_lines(
        self, index: LineIndex, start_line: int, end_line: int, *, margin: int = 0
    ) -> list[Annotation]:
        """
        扫描 [start_line, end_line) 并返回该范围内的注解（行号为文档行号）。

        margin > 0 时向两侧各多读 margin 行作为上下文，使起点在范围之前的多行匹配
        同样能被找到；返回值只包含锚点落在范围内的注解。

        Raises:
            WindowOverflowError: 上下文中出现跨越 margin 行及以上的匹配，
                此时无法保证范围内的结果完整。
        """
        start_line = max(0, start_line)
        end_line = min(index.line_count, end_line)
        if start_line >= end_line:
            return []
        scan_from = max(0, start_line - margin)
        scan_to = min(index.line_count, end_line + margin)
        window_text = index.span_text(scan_from, scan_to)
        window = LineIndex(window_text)
        matches = scan(window_text, self.rules(), self.store)
        if margin:
            span = max(
                (window.line_of(anchor_offset(m)) - window.line_of(m.start) for m in matches),
                default=0,
            )
            if span >= margin:
                raise WindowOverflowError(f"匹配跨越 {span + 1} 行，超出上下文 {margin} 行")
        logger.debug(
            "窗口扫描完成。",
            start_line=start_line,
            end_line=end_line,
            margin=margin,
            chars=len(window_text),
            matches=len(matches),
        )
        annotations = compose(
            matches,
            window,
            self.store,
            self.config.max_text_length,
            dedupe=self.config.dedupe,
            line_offset=scan_from,
        )
        return [a for a in annotations if start_line <= a.line < end_line]

    def annotate_text(self, text: str) -> list[Annotation]:
        """对整段文本执行一次完整扫描。"""
        index = LineIndex(text)
        return self.annotate_lines(index, 0, index.line_count)
