# l10n_helper/scheduler.py
"""
增量更新调度器。

状态机：
    IDLE ──编辑/重载事件──▶ PENDING_DEBOUNCE ──计时器到期──▶ SCANNING ──发布──▶ IDLE

- 防抖：PENDING_DEBOUNCE 期间的新事件取消旧计时任务并重新计时，只有最后一次
  突发真正触发扫描；突发中的编辑操作会累积。
- 局部/全量：突发内编辑操作少于阈值、没有插入换行且每次事件都未改变行数时，
  只重扫编辑附近的行窗口（带多行匹配所需的上下文），窗口外的既有注解原样保留；
  否则重扫全文。
- 切换文档：任何状态下立即取消待执行任务、清空注解并同步全量重扫。
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from l10n_helper.exceptions import WindowOverflowError
from l10n_helper.types import Annotation, SchedulerState, ScanMode, TextChange

if TYPE_CHECKING:
    from l10n_helper.context import HelperContext
    from l10n_helper.document import AnnotationRenderer, LineIndex, TextDocument

logger = structlog.get_logger(__name__)

# 局部窗口：首个编辑行之前 1 行，到最后编辑行之后 2 行（不含）
WINDOW_LINES_BEFORE = 1
WINDOW_LINES_AFTER = 2
# 局部扫描支持的多行匹配跨度（行数上限，不含）；超出时改为全量扫描
MATCH_CONTEXT_LINES = 10


class UpdateScheduler:
    """
    驱动 提取 → 组合 → 渲染 的调度器，运行在单个 asyncio 事件循环上。
    """

    def __init__(self, context: "HelperContext", renderer: "AnnotationRenderer"):
        """
        初始化调度器。

        Args:
            context: 提供配置、翻译缓存与规则目录的上下文。
            renderer: 编辑器的注解渲染层。
        """
        self._context = context
        self._renderer = renderer
        self._document: "TextDocument | None" = None
        self._state = SchedulerState.IDLE
        self._pending: asyncio.Task[None] | None = None
        self._burst: list[tuple[int, int]] = []
        self._force_full = False
        self._lines_shifted = False
        self._seen_line_count: int | None = None
        self._annotations: tuple[Annotation, ...] = ()
        self._scanned_line_count: int | None = None
        self._suspended = False
        self.last_mode: ScanMode | None = None
        self.scan_count = 0

    # ------------------------------------------------------------------ 属性

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def annotations(self) -> tuple[Annotation, ...]:
        """当前已发布（已渲染）的注解集合。"""
        return self._annotations

    @property
    def document(self) -> "TextDocument | None":
        return self._document

    @property
    def suspended(self) -> bool:
        return self._suspended

    # ------------------------------------------------------------------ 事件入口

    def notify_edit(self, changes: Sequence[TextChange]) -> None:
        """
        接收一次编辑事件（文档已应用这些编辑）。

        必须在事件循环中调用；重新计时等价于“取消 + 重新调度”。
        """
        if not changes or not self._accepts_document():
            return
        assert self._document is not None
        index = self._document.index()
        for change in changes:
            start_line = index.line_of(change.range_offset)
            end_line = index.line_of(change.range_offset + len(change.text))
            self._burst.append((start_line, end_line))
            if "\n" in change.text:
                self._lines_shifted = True
        # 突发中任一事件改变行数，之前记录的编辑行号随之失效
        if self._seen_line_count is not None and index.line_count != self._seen_line_count:
            self._lines_shifted = True
        self._seen_line_count = index.line_count
        self._restart_debounce("edit")

    def notify_reload(self) -> None:
        """翻译缓存已重载完毕：以防抖方式安排一次全量重扫。"""
        if not self._accepts_document():
            return
        self._force_full = True
        self._restart_debounce("reload")

    def switch_document(self, document: "TextDocument | None") -> list[Annotation]:
        """切换活动文档：清空旧注解并立即同步全量重扫（不经过防抖）。"""
        self._cancel_pending("document_switched")
        self._document = document
        self._publish([], None)
        if not self._accepts_document():
            return []
        return self.rescan()

    def rescan(self) -> list[Annotation]:
        """立即对当前文档执行全量重扫，取消任何待执行的防抖任务。"""
        self._cancel_pending("forced_rescan")
        if not self._accepts_document():
            return []
        return self._run_scan(ScanMode.FULL, [])

    def suspend(self) -> None:
        """暂停整个流水线：清除注解，但保留翻译缓存。"""
        self._suspended = True
        self._cancel_pending("suspended")
        self._publish([], None)
        logger.info("注解已暂停。")

    def resume(self) -> list[Annotation]:
        self._suspended = False
        logger.info("注解已恢复。")
        return self.rescan()

    def clear(self) -> None:
        """清除当前注解，不改变启用状态。"""
        self._cancel_pending("cleared")
        self._publish([], None)

    async def wait_until_idle(self) -> None:
        """等待所有待执行的防抖/扫描任务完成。"""
        while self._pending is not None and not self._pending.done():
            await asyncio.wait({self._pending})

    # ------------------------------------------------------------------ 状态机

    def _transition(self, new_state: SchedulerState, reason: str) -> None:
        if new_state is not self._state:
            logger.debug(
                "调度器状态变更。",
                from_state=self._state.value,
                to_state=new_state.value,
                reason=reason,
            )
        self._state = new_state

    def _accepts_document(self) -> bool:
        if self._suspended or self._document is None:
            return False
        language_ids = self._context.config.language_ids
        return not language_ids or self._document.language_id in language_ids

    def _restart_debounce(self, reason: str) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
            logger.debug("防抖计时已重置。", reason=reason, pending_edits=len(self._burst))
        self._transition(SchedulerState.PENDING_DEBOUNCE, reason)
        self._pending = asyncio.get_running_loop().create_task(self._debounced_scan())

    def _cancel_pending(self, reason: str) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self._burst = []
        self._force_full = False
        self._lines_shifted = False
        self._seen_line_count = self._scanned_line_count
        self._transition(SchedulerState.IDLE, reason)

    async def _debounced_scan(self) -> None:
        await asyncio.sleep(self._context.config.debounce_delay)
        burst, self._burst = self._burst, []
        force_full, self._force_full = self._force_full, False
        lines_shifted, self._lines_shifted = self._lines_shifted, False
        self._pending = None
        if not self._accepts_document():
            self._transition(SchedulerState.IDLE, "document_rejected")
            return
        mode = ScanMode.FULL if force_full else self._choose_mode(burst, lines_shifted)
        self._run_scan(mode, burst)

    def _choose_mode(
        self, burst: Sequence[tuple[int, int]], lines_shifted: bool = False
    ) -> ScanMode:
        assert self._document is not None
        if not burst or len(burst) >= self._context.config.partial_threshold:
            return ScanMode.FULL
        # 插入或删除过整行时，突发中较早记录的行号可能已经移位
        if lines_shifted:
            return ScanMode.FULL
        # 行数变化后窗口外的注解行号已失效
        if self._scanned_line_count != self._document.line_count:
            return ScanMode.FULL
        return ScanMode.PARTIAL

    # ------------------------------------------------------------------ 扫描与发布

    def _run_scan(
        self, mode: ScanMode, burst: Sequence[tuple[int, int]]
    ) -> list[Annotation]:
        assert self._document is not None
        self._transition(SchedulerState.SCANNING, mode.value)
        index = self._document.index()
        try:
            if mode is ScanMode.PARTIAL:
                try:
                    annotations = self._scan_partial(index, burst)
                except WindowOverflowError as e:
                    logger.debug("局部窗口容纳不下多行匹配，改为全量扫描。", error=str(e))
                    mode = ScanMode.FULL
            if mode is ScanMode.FULL:
                annotations = self._context.annotate_lines(index, 0, index.line_count)
        except Exception as e:
            logger.error(
                "扫描文档时发生未知错误，保留现有注解。",
                uri=self._document.uri,
                mode=mode.value,
                error=str(e),
                exc_info=True,
            )
            self._transition(SchedulerState.IDLE, "scan_failed")
            return list(self._annotations)

        self.last_mode = mode
        self.scan_count += 1
        self._publish(annotations, index.line_count)
        logger.debug(
            "注解已更新。",
            uri=self._document.uri,
            mode=mode.value,
            count=len(annotations),
        )
        return annotations

    def _scan_partial(
        self, index: "LineIndex", burst: Sequence[tuple[int, int]]
    ) -> list[Annotation]:
        start_line = max(0, min(start for start, _ in burst) - WINDOW_LINES_BEFORE)
        end_line = max(end for _, end in burst) + WINDOW_LINES_AFTER
        # 起点在编辑窗口内的多行匹配，锚点可能落在窗口之后
        end_line = min(index.line_count, end_line + MATCH_CONTEXT_LINES - 1)
        kept = [a for a in self._annotations if a.line < start_line or a.line >= end_line]
        fresh = self._context.annotate_lines(
            index, start_line, end_line, margin=MATCH_CONTEXT_LINES
        )
        return sorted([*kept, *fresh], key=lambda a: a.line)

    def _publish(self, annotations: Sequence[Annotation], line_count: int | None) -> None:
        """以一次操作整体替换已渲染的注解；空集合时显式清除。"""
        self._annotations = tuple(annotations)
        self._scanned_line_count = line_count
        self._seen_line_count = line_count
        try:
            if self._annotations:
                self._renderer.render(self._annotations)
            else:
                self._renderer.clear()
        except Exception as e:
            logger.error(
                "渲染注解时发生错误。",
                count=len(self._annotations),
                error=str(e),
                exc_info=True,
            )
        self._transition(SchedulerState.IDLE, "published")
