# tests/unit/test_store.py
"""
针对 `l10n_helper.store` 模块的单元测试。

验证资源文件的选择规则、元数据与非字符串值的过滤，以及加载失败时
“缓存置空 + 报告错误、不抛出异常”的降级行为。
"""

from pathlib import Path

import pytest

from l10n_helper.exceptions import ResourceLoadError
from l10n_helper.store import TranslationStore, find_resource_file, parse_resource

from tests.helpers.resources import write_resource


@pytest.mark.asyncio
async def test_reload_selects_preferred_locale_file(project_root: Path) -> None:
    """测试 reload 选择文件名包含首选语言代码的 ARB 文件。"""
    store = TranslationStore()
    report = await store.reload(project_root / "assets" / "strings", "ja")

    assert report.ok
    assert report.source_file is not None
    assert report.source_file.name == "app_ja.arb"
    assert store.source_file == report.source_file
    assert store.lookup("ok_button") == "OK"
    assert store.lookup("cancel_button") == "Cancel"


@pytest.mark.asyncio
async def test_reload_skips_metadata_and_non_string_values(project_root: Path) -> None:
    """测试以 @ 开头的元数据键和非字符串值被跳过。"""
    store = TranslationStore()
    report = await store.reload(project_root / "assets" / "strings", "ja")

    assert report.loaded == 3
    assert "@cancel_button" not in store
    assert "@@locale" not in store
    assert store.lookup("item_count") is None
    assert sorted(store.keys()) == ["cancel_button", "long_text", "ok_button"]


@pytest.mark.asyncio
async def test_first_matching_file_wins(tmp_path: Path) -> None:
    """测试多个候选文件时按文件名顺序取第一个，不做合并或回退。"""
    write_resource(tmp_path, "intl_ja.arb", {"greeting": "from intl"})
    write_resource(tmp_path, "app_ja.arb", {"greeting": "from app"})
    write_resource(tmp_path, "app_ja.json", {"greeting": "wrong extension"})

    store = TranslationStore()
    report = await store.reload(tmp_path, "ja")

    assert report.source_file == tmp_path / "app_ja.arb"
    assert store.lookup("greeting") == "from app"


@pytest.mark.asyncio
async def test_missing_directory_empties_store_and_reports(tmp_path: Path) -> None:
    """测试资源目录不存在时缓存被清空，错误通过报告返回而非抛出。"""
    store = TranslationStore({"stale": "value"})
    report = await store.reload(tmp_path / "does-not-exist", "ja")

    assert not report.ok
    assert isinstance(report.error, ResourceLoadError)
    assert store.is_empty()
    assert store.source_file is None


@pytest.mark.asyncio
async def test_no_matching_locale_file_reports_error(project_root: Path) -> None:
    """测试没有包含语言代码的文件时报告错误（没有语言回退链）。"""
    store = TranslationStore()
    report = await store.reload(project_root / "assets" / "strings", "fr")

    assert not report.ok
    assert store.is_empty()


@pytest.mark.asyncio
async def test_malformed_resource_replaces_previous_mapping(project_root: Path) -> None:
    """测试格式错误的资源文件会让之前加载的映射被空映射替换。"""
    strings = project_root / "assets" / "strings"
    store = TranslationStore()
    await store.reload(strings, "ja")
    assert not store.is_empty()

    write_resource(strings, "app_ja.arb", "{ not json")
    report = await store.reload(strings, "ja")

    assert not report.ok
    assert report.error is not None and report.error.path == str(strings / "app_ja.arb")
    assert store.is_empty()
    assert store.lookup("ok_button") is None


def test_parse_resource_rejects_non_object() -> None:
    """测试顶层不是对象的内容被拒绝。"""
    with pytest.raises(ResourceLoadError, match="顶层必须是对象"):
        parse_resource('["ok_button", "OK"]')


def test_find_resource_file_ignores_other_extensions(tmp_path: Path) -> None:
    write_resource(tmp_path, "app_ja.json", {})
    assert find_resource_file(tmp_path, "ja", ".arb") is None


def test_lookups_of_distinct_keys_are_isolated() -> None:
    """测试不同键的查找互不干扰。"""
    store = TranslationStore({"k1": "one", "k2": "two"})
    assert store.lookup("k1") == "one"
    assert store.lookup("k2") == "two"
    assert store.lookup("k1") == "one"
    assert len(store) == 2


def test_store_mapping_is_read_only() -> None:
    """测试内部映射不能被外部就地修改。"""
    source = {"k1": "one"}
    store = TranslationStore(source)
    source["k1"] = "mutated"
    assert store.lookup("k1") == "one"
