# l10n_helper/composer.py
"""
将原始匹配组合为行尾注解。

同一锚点行上的所有匹配（无论来自哪条规则）合并为一条注解：
解析译文 → 截断 → 按首次出现顺序去重 → 以 ", " 连接。
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Literal

from l10n_helper.types import Annotation, RawMatch

if TYPE_CHECKING:
    from l10n_helper.document import LineIndex
    from l10n_helper.store import TranslationStore

ELLIPSIS = "..."
LABEL_SEPARATOR = ", "

DedupeMode = Literal["exact", "containment"]


def truncate_text(text: str, max_length: int) -> str:
    """超过 `max_length` 的文本截断为前 `max_length` 个字符并追加省略号。"""
    if len(text) <= max_length:
        return text
    return text[:max_length] + ELLIPSIS


def _is_duplicate(candidate: str, accepted: list[str], mode: DedupeMode) -> bool:
    if mode == "containment":
        return any(candidate in segment for segment in accepted)
    return candidate in accepted


def anchor_offset(match: RawMatch) -> int:
    """锚点取匹配的结束位置（最后一个字符），跨行的匹配锚定在结束行。"""
    return max(match.start, match.end - 1)


def compose(
    matches: Iterable[RawMatch],
    index: "LineIndex",
    store: "TranslationStore",
    max_text_length: int,
    *,
    dedupe: DedupeMode = "exact",
    line_offset: int = 0,
) -> list[Annotation]:
    """
    按锚点行分组并生成注解，每个有译文的行恰好一条。

    Args:
        matches: 扫描得到的原始匹配，偏移量相对于 `index` 对应的文本。
        index: 被扫描文本的行索引。
        store: 用于解析译文的翻译缓存。
        max_text_length: 单段译文的最大长度。
        dedupe: 去重方式，"exact" 为完全相同，"containment" 为子串包含。
        line_offset: 被扫描文本首行在整个文档中的行号（局部扫描时非零）。

    Returns:
        按行号排序的注解列表。
    """
    segments_by_line: dict[int, list[str]] = {}
    for match in matches:
        value = store.lookup(match.key)
        if not value:
            continue
        line = index.line_of(anchor_offset(match))
        segments = segments_by_line.setdefault(line, [])
        segment = truncate_text(value, max_text_length)
        if not _is_duplicate(segment, segments, dedupe):
            segments.append(segment)

    annotations = []
    for line in sorted(segments_by_line):
        segments = segments_by_line[line]
        if not segments:
            continue
        annotations.append(
            Annotation(
                line=line + line_offset,
                column=len(index.line_text(line)),
                label=LABEL_SEPARATOR.join(segments),
            )
        )
    return annotations
