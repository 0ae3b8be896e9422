# l10n_helper/types.py
"""
本模块定义了 l10n-helper 的核心数据类型。
这些类型是提取、组合、调度各层之间数据交换的契约。
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from l10n_helper.exceptions import ResourceLoadError


class SchedulerState(str, Enum):
    """更新调度器所处的状态。"""
    IDLE = "idle"
    PENDING_DEBOUNCE = "pending_debounce"
    SCANNING = "scanning"


class ScanMode(str, Enum):
    """一次扫描覆盖的范围。"""
    PARTIAL = "partial"
    FULL = "full"


class ResourceEventKind(str, Enum):
    """文件监视器推送的资源文件事件类型。"""
    CREATED = "created"
    CHANGED = "changed"
    DELETED = "deleted"


@dataclass(frozen=True)
class ExtractionRule:
    """
    一条已编译的提取规则。

    Attributes:
        pattern: 已编译的正则（MULTILINE | DOTALL）。
        capture_group: 指向本地化键的捕获组序号（从 1 开始）。
        derived: 是否为自动派生的“命名参数前缀”规则。
    """
    pattern: re.Pattern[str]
    capture_group: int
    derived: bool = False

    @property
    def source(self) -> str:
        return self.pattern.pattern


@dataclass(frozen=True)
class RawMatch:
    """扫描阶段产生的一次匹配，偏移量相对于被扫描的文本。"""
    key: str
    start: int
    end: int


class Annotation(NamedTuple):
    """
    渲染在行尾的一条注解。

    Attributes:
        line: 锚点所在行（从 0 开始）。
        column: 锚点列，即该行的长度（行尾）。
        label: 已截断、去重并以逗号连接的译文。
    """
    line: int
    column: int
    label: str


@dataclass(frozen=True)
class TextChange:
    """编辑器报告的一次离散编辑操作（与 VS Code 的 contentChanges 同构）。"""
    range_offset: int
    range_length: int
    text: str = ""


@dataclass(frozen=True)
class LoadReport:
    """TranslationStore.reload 的结果。失败不会抛出，而是放在 error 中。"""
    source_file: Path | None = None
    loaded: int = 0
    error: "ResourceLoadError | None" = None

    @property
    def ok(self) -> bool:
        return self.error is None
