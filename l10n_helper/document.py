# l10n_helper/document.py
"""
编辑器侧协作者的契约，以及一个内存文档实现。

- `TextDocument`：只读访问当前文档的全文与逐行文本。
- `AnnotationRenderer`：渲染/清除行尾注解。
- `TextBuffer`：`TextDocument` 的内存实现，可应用编辑操作（CLI 与测试使用）。
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from l10n_helper.types import Annotation, TextChange


class LineIndex:
    """文本的行偏移索引：字符偏移 ⇄ 行号。"""

    def __init__(self, text: str):
        self._text = text
        self._starts = [0]
        self._starts.extend(i + 1 for i, ch in enumerate(text) if ch == "\n")

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def line_of(self, offset: int) -> int:
        """返回包含 `offset` 的行号；越界偏移被钳制到首/末行。"""
        offset = max(0, min(offset, len(self._text)))
        return bisect_right(self._starts, offset) - 1

    def offset_of_line(self, line: int) -> int:
        return self._starts[line]

    def line_text(self, line: int) -> str:
        """返回第 `line` 行的文本，不含换行符。越界时抛出 IndexError。"""
        if not 0 <= line < len(self._starts):
            raise IndexError(f"行号 {line} 超出范围（共 {len(self._starts)} 行）")
        start = self._starts[line]
        end = (
            self._starts[line + 1] - 1 if line + 1 < len(self._starts) else len(self._text)
        )
        return self._text[start:end].rstrip("\r")

    def span_text(self, start_line: int, end_line: int) -> str:
        """返回 [start_line, end_line) 的原始文本（含行间换行符）。"""
        start = self._starts[start_line]
        end = self._starts[end_line] if end_line < len(self._starts) else len(self._text)
        return self._text[start:end]


@runtime_checkable
class TextDocument(Protocol):
    """编辑器中当前活动文档的只读视图。"""

    uri: str
    language_id: str

    @property
    def text(self) -> str: ...

    @property
    def line_count(self) -> int: ...

    def line_text(self, line: int) -> str: ...

    def line_of(self, offset: int) -> int: ...

    def index(self) -> LineIndex: ...


@runtime_checkable
class AnnotationRenderer(Protocol):
    """编辑器的注解渲染层。"""

    def render(self, annotations: Sequence[Annotation]) -> None: ...

    def clear(self) -> None: ...


class TextBuffer:
    """一个可编辑的内存文档。"""

    def __init__(self, text: str = "", *, uri: str = "untitled", language_id: str = "dart"):
        self.uri = uri
        self.language_id = language_id
        self.version = 0
        self._text = text
        self._index = LineIndex(text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def line_count(self) -> int:
        return self._index.line_count

    def line_text(self, line: int) -> str:
        return self._index.line_text(line)

    def line_of(self, offset: int) -> int:
        return self._index.line_of(offset)

    def offset_of_line(self, line: int) -> int:
        return self._index.offset_of_line(line)

    def index(self) -> LineIndex:
        return self._index

    def apply(self, changes: Iterable[TextChange]) -> list[TextChange]:
        """按顺序应用编辑操作，返回已应用的操作列表。"""
        applied = []
        for change in changes:
            start = max(0, min(change.range_offset, len(self._text)))
            end = max(start, min(start + change.range_length, len(self._text)))
            self._text = self._text[:start] + change.text + self._text[end:]
            applied.append(change)
        if applied:
            self._index = LineIndex(self._text)
            self.version += 1
        return applied

    def replace_line(self, line: int, new_text: str) -> TextChange:
        """用 `new_text` 替换整行内容（不含换行符），返回对应的编辑操作。"""
        start = self._index.offset_of_line(line)
        change = TextChange(
            range_offset=start,
            range_length=len(self._index.line_text(line)),
            text=new_text,
        )
        self.apply([change])
        return change

    @classmethod
    def from_lines(cls, lines: Iterable[str], **kwargs: str) -> "TextBuffer":
        return cls("\n".join(lines), **kwargs)
