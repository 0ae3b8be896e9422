# l10n_helper/app.py
"""
L10nHelper：面向编辑器宿主的控制器。

宿主把文件监视、文档编辑、活动文档切换、配置变更等事件转交给这里，
并通过 reload/toggle 两个命令获得面向用户的反馈文本。
本模块中的任何失败都只会导致“显示更少的注解”，不会抛给宿主。
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog

from l10n_helper.config import L10nHelperConfig
from l10n_helper.context import HelperContext
from l10n_helper.document import AnnotationRenderer, TextDocument
from l10n_helper.scheduler import UpdateScheduler
from l10n_helper.types import LoadReport, ResourceEventKind, TextChange

logger = structlog.get_logger(__name__)

MESSAGE_PREFIX = "L10n Helper"


class L10nHelper:
    """将上下文与调度器装配在一起，并处理所有宿主事件。"""

    def __init__(
        self,
        config: L10nHelperConfig,
        renderer: AnnotationRenderer,
        *,
        context: HelperContext | None = None,
    ):
        self.context = context or HelperContext(config=config)
        self.scheduler = UpdateScheduler(self.context, renderer)
        if not config.enabled:
            self.scheduler.suspend()

    @property
    def config(self) -> L10nHelperConfig:
        return self.context.config

    @property
    def enabled(self) -> bool:
        return not self.scheduler.suspended

    # ------------------------------------------------------------------ 生命周期

    async def start(self, document: TextDocument | None = None) -> LoadReport:
        """激活：加载翻译缓存，然后对活动文档做一次全量扫描。"""
        report = await self.context.reload()
        self.scheduler.switch_document(document)
        logger.info(
            "L10n Helper 已启动。",
            enabled=self.enabled,
            translations=report.loaded,
            rules=len(self.context.rules()),
        )
        return report

    def stop(self) -> None:
        """停用：清除注解并取消待执行的任务。"""
        self.scheduler.clear()
        logger.info("L10n Helper 已停止。")

    # ------------------------------------------------------------------ 编辑器事件

    def on_document_changed(
        self, document: TextDocument, changes: Sequence[TextChange]
    ) -> None:
        if document is not self.scheduler.document:
            return
        self.scheduler.notify_edit(changes)

    def on_active_document_changed(self, document: TextDocument | None) -> None:
        self.scheduler.switch_document(document)

    # ------------------------------------------------------------------ 文件监视

    def is_resource_file(self, path: Path) -> bool:
        """判断路径是否位于资源目录之下且扩展名匹配。"""
        path = Path(path)
        if not path.name.endswith(self.config.resource_extension):
            return False
        root = self.config.resource_path.resolve()
        return path.resolve().is_relative_to(root)

    async def on_resource_event(self, kind: ResourceEventKind, path: Path) -> LoadReport | None:
        """资源文件被创建/修改/删除：重载缓存，完成后再安排全量重扫。"""
        if not self.is_resource_file(path):
            return None
        logger.info("检测到翻译资源变化，正在重新加载...", kind=kind.value, path=str(path))
        report = await self.context.reload()
        self.scheduler.notify_reload()
        return report

    # ------------------------------------------------------------------ 配置

    async def on_configuration_changed(self, config: L10nHelperConfig) -> None:
        previous = self.context.config
        self.context.config = config

        if previous.resource_fingerprint != config.resource_fingerprint:
            await self.context.reload()
        if previous.pattern_fingerprint != config.pattern_fingerprint:
            logger.info("提取规则配置已变更。", rules=len(self.context.rules()))

        if not config.enabled:
            if self.enabled:
                self.scheduler.suspend()
        elif not self.enabled:
            self.scheduler.resume()
        else:
            self.scheduler.rescan()

    # ------------------------------------------------------------------ 命令

    async def reload_command(self) -> str:
        """重新读取资源文件并强制全量重扫，返回反馈文本。"""
        report = await self.context.reload()
        self.scheduler.rescan()
        if not report.ok:
            return f"{MESSAGE_PREFIX}: 翻译资源加载失败：{report.error}"
        assert report.source_file is not None
        return f"{MESSAGE_PREFIX}: 已重新加载 {report.loaded} 条翻译（{report.source_file.name}）"

    def toggle_command(self) -> str:
        """启用/暂停整个流水线，不丢弃翻译缓存。"""
        enabled = not self.enabled
        self.context.config = self.config.model_copy(update={"enabled": enabled})
        if enabled:
            self.scheduler.resume()
            return f"{MESSAGE_PREFIX}: 已启用"
        self.scheduler.suspend()
        return f"{MESSAGE_PREFIX}: 已禁用"
