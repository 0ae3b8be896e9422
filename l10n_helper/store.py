# l10n_helper/store.py
"""
本模块提供单一语言的翻译缓存（TranslationStore）。

缓存从资源目录中选出的一个 ARB 文件整体重建；重建失败时缓存被置空，
错误通过 LoadReport 报告给调用方，而不会以异常形式冒泡。
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

import structlog

from l10n_helper.exceptions import ResourceLoadError
from l10n_helper.types import LoadReport

logger = structlog.get_logger(__name__)

METADATA_PREFIX = "@"


def find_resource_file(
    source_path: Path, preferred_locale: str, extension: str = ".arb"
) -> Path | None:
    """按文件名排序，返回第一个扩展名匹配且包含语言代码的文件（不做语言回退）。"""
    for candidate in sorted(source_path.iterdir()):
        name = candidate.name
        if name.endswith(extension) and preferred_locale in name and candidate.is_file():
            return candidate
    return None


def parse_resource(content: str, path: str | None = None) -> dict[str, str]:
    """
    将资源文件内容解析为扁平的 key→string 映射。

    以 `@` 开头的元数据键和非字符串值被跳过。

    Raises:
        ResourceLoadError: 内容不是合法 JSON，或顶层不是对象。
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ResourceLoadError(f"资源文件不是合法的 JSON: {e}", path=path) from e
    if not isinstance(data, dict):
        raise ResourceLoadError("资源文件顶层必须是对象。", path=path)
    return {
        key: value
        for key, value in data.items()
        if key and not key.startswith(METADATA_PREFIX) and isinstance(value, str)
    }


def _read_translations(
    source_path: Path, preferred_locale: str, extension: str
) -> tuple[Path, dict[str, str]]:
    """[阻塞] 定位并读取资源文件，在工作线程中执行。"""
    if not source_path.is_dir():
        raise ResourceLoadError(
            f"资源目录不存在: {source_path}", path=str(source_path)
        )
    try:
        resource_file = find_resource_file(source_path, preferred_locale, extension)
    except OSError as e:
        raise ResourceLoadError(
            f"无法列出资源目录: {e}", path=str(source_path)
        ) from e
    if resource_file is None:
        raise ResourceLoadError(
            f"资源目录中没有包含 '{preferred_locale}' 的 {extension} 文件。",
            path=str(source_path),
        )
    try:
        content = resource_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceLoadError(
            f"无法读取资源文件: {e}", path=str(resource_file)
        ) from e
    return resource_file, parse_resource(content, path=str(resource_file))


class TranslationStore:
    """当前语言的 key→string 翻译缓存。每次 reload 都整体替换映射。"""

    def __init__(self, translations: Mapping[str, str] | None = None):
        self._entries: Mapping[str, str] = MappingProxyType(dict(translations or {}))
        self._source_file: Path | None = None

    @property
    def source_file(self) -> Path | None:
        """最近一次成功加载的资源文件。"""
        return self._source_file

    async def reload(
        self, source_path: Path, preferred_locale: str, extension: str = ".arb"
    ) -> LoadReport:
        """
        从 `source_path` 重新加载翻译。

        文件 I/O 在工作线程中完成；新映射构建完毕后以一次赋值替换旧映射，
        因此任何时刻的查找只会看到旧映射或新映射。
        """
        try:
            resource_file, entries = await asyncio.to_thread(
                _read_translations, Path(source_path), preferred_locale, extension
            )
        except ResourceLoadError as e:
            self._replace({}, None)
            logger.warning(
                "翻译资源加载失败，缓存已清空。", error=str(e), path=e.path
            )
            return LoadReport(error=e)

        self._replace(entries, resource_file)
        logger.info(
            "已加载翻译资源。", file=resource_file.name, count=len(entries)
        )
        return LoadReport(source_file=resource_file, loaded=len(entries))

    def _replace(self, entries: dict[str, str], source_file: Path | None) -> None:
        self._entries = MappingProxyType(entries)
        self._source_file = source_file

    def lookup(self, key: str) -> str | None:
        return self._entries.get(key)

    def is_empty(self) -> bool:
        return not self._entries

    def keys(self) -> list[str]:
        return list(self._entries)

    def items(self) -> list[tuple[str, str]]:
        return list(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
