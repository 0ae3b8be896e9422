# l10n_helper/__init__.py
"""l10n-helper：在源码中把本地化键替换为实时译文预览的匹配与注解引擎。

主要组成：翻译缓存（TranslationStore）、规则目录（PatternCatalog）、
提取（scan）、组合（compose）以及增量更新调度器（UpdateScheduler）。
"""

__version__ = "0.3.0"

from .app import L10nHelper
from .composer import compose, truncate_text
from .config import L10nHelperConfig, PatternSpec, load_config
from .context import HelperContext
from .document import AnnotationRenderer, LineIndex, TextBuffer, TextDocument
from .exceptions import (
    ConfigParseError,
    ConfigurationError,
    L10nHelperError,
    ResourceLoadError,
    ScanError,
    WindowOverflowError,
)
from .extractor import scan
from .patterns import DEFAULT_PATTERNS, PatternCatalog
from .scheduler import UpdateScheduler
from .store import TranslationStore
from .types import (
    Annotation,
    ExtractionRule,
    LoadReport,
    RawMatch,
    ResourceEventKind,
    SchedulerState,
    ScanMode,
    TextChange,
)

__all__ = [
    "__version__",
    "L10nHelper",
    "L10nHelperConfig",
    "PatternSpec",
    "load_config",
    "HelperContext",
    "TranslationStore",
    "PatternCatalog",
    "DEFAULT_PATTERNS",
    "UpdateScheduler",
    "scan",
    "compose",
    "truncate_text",
    "TextBuffer",
    "TextDocument",
    "AnnotationRenderer",
    "LineIndex",
    "Annotation",
    "ExtractionRule",
    "LoadReport",
    "RawMatch",
    "ResourceEventKind",
    "SchedulerState",
    "ScanMode",
    "TextChange",
    "L10nHelperError",
    "ConfigurationError",
    "ConfigParseError",
    "ResourceLoadError",
    "ScanError",
    "WindowOverflowError",
]
