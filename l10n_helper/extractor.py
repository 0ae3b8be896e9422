# l10n_helper/extractor.py
"""
包含从文本中提取本地化键引用的核心逻辑。

扫描是纯函数：每条规则都通过 `finditer` 从头遍历文本，扫描位置只存在于
本次调用的局部状态中，同一规则对象可以安全地在多次扫描之间复用。
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog

from l10n_helper.exceptions import ScanError
from l10n_helper.types import ExtractionRule, RawMatch

if TYPE_CHECKING:
    from l10n_helper.store import TranslationStore

logger = structlog.get_logger(__name__)


def scan_rule(
    text: str, rule: ExtractionRule, store: "TranslationStore"
) -> list[RawMatch]:
    """
    用单条规则扫描文本。

    捕获组为空或键在翻译缓存中不存在的匹配会被丢弃。

    Raises:
        ScanError: 匹配过程中发生运行期错误。
    """
    matches = []
    try:
        for match in rule.pattern.finditer(text):
            key = match.group(rule.capture_group)
            if not key or store.lookup(key) is None:
                continue
            matches.append(RawMatch(key=key, start=match.start(), end=match.end()))
    except (re.error, IndexError, RecursionError) as e:
        raise ScanError(f"规则匹配失败: {e}", rule=rule.source) from e
    return matches


def scan(
    text: str, rules: Iterable[ExtractionRule], store: "TranslationStore"
) -> list[RawMatch]:
    """
    使用所有规则扫描文本，返回能在翻译缓存中解析的匹配。

    单条规则出错时记录日志并跳过，其余规则照常执行。
    结果按规则顺序排列，同一规则内按出现顺序排列。
    """
    matches: list[RawMatch] = []
    if not text or store.is_empty():
        return matches

    for rule in rules:
        try:
            matches.extend(scan_rule(text, rule, store))
        except ScanError as e:
            logger.warning("扫描时跳过出错的规则。", rule=e.rule, error=str(e))
    return matches
