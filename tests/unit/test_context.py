# tests/unit/test_context.py
"""
针对 `l10n_helper.context.HelperContext` 的端到端扫描测试。

这些场景串联了 规则目录 → 提取 → 组合 整条流水线。
"""

from pathlib import Path

import pytest

from l10n_helper.config import L10nHelperConfig, PatternSpec
from l10n_helper.context import HelperContext
from l10n_helper.document import LineIndex
from l10n_helper.exceptions import WindowOverflowError
from l10n_helper.store import TranslationStore
from l10n_helper.types import Annotation

from tests.helpers.fakes import SAMPLE_LINES
from tests.helpers.resources import write_resource


@pytest.mark.asyncio
async def test_scenario_default_pattern_from_resource_file(project_root: Path) -> None:
    """资源文件 + 默认规则：`Text(context.l10n.ok_button)` 注解为 `OK`。"""
    context = HelperContext(config=L10nHelperConfig(project_root=project_root))
    report = await context.reload()

    assert report.ok
    text = "Text(context.l10n.ok_button)"
    assert context.annotate_text(text) == [Annotation(line=0, column=len(text), label="OK")]


def test_scenario_custom_rule_with_named_argument(store: TranslationStore) -> None:
    """自定义规则 `tr(key)` 以及派生的 `label: tr(key)` 都注解为 `Cancel`。"""
    config = L10nHelperConfig(
        custom_patterns=[PatternSpec(pattern=r"tr\((\w+)\)", capture_group=1)]
    )
    context = HelperContext(config=config, store=store)

    assert [a.label for a in context.annotate_text("tr(cancel_button)")] == ["Cancel"]
    assert [a.label for a in context.annotate_text("label: tr(cancel_button)")] == ["Cancel"]


def test_scenario_truncation(context: HelperContext) -> None:
    annotations = context.annotate_text("Text(context.l10n.long_text)")
    assert annotations[0].label == "Please enter your fu..."


def test_full_scan_is_idempotent(context: HelperContext) -> None:
    text = "\n".join(SAMPLE_LINES)
    first = context.annotate_text(text)
    second = context.annotate_text(text)

    assert first == second
    assert [(a.line, a.label) for a in first] == [
        (2, "OK"),
        (3, "Cancel"),
        (5, "Please enter your fu..."),
    ]


def test_annotate_lines_limits_scan_to_window(context: HelperContext) -> None:
    """测试窗口扫描只返回窗口内的注解，且行号为文档行号。"""
    index = LineIndex("\n".join(SAMPLE_LINES))
    annotations = context.annotate_lines(index, 3, 5)

    assert annotations == [Annotation(line=3, column=len(SAMPLE_LINES[3]), label="Cancel")]
    assert context.annotate_lines(index, 6, 100) == []
    assert context.annotate_lines(index, 5, 5) == []


def test_contexts_are_independent(config: L10nHelperConfig) -> None:
    """测试多个上下文实例之间不共享缓存状态。"""
    first = HelperContext(config=config, store=TranslationStore({"ok_button": "OK"}))
    second = HelperContext(config=config, store=TranslationStore({"ok_button": "はい"}))
    text = "context.l10n.ok_button"

    assert first.annotate_text(text)[0].label == "OK"
    assert second.annotate_text(text)[0].label == "はい"


def test_annotate_lines_margin_finds_match_starting_before_range(
    store: TranslationStore,
) -> None:
    """测试带上下文的窗口扫描能找到起点在范围之前的多行匹配，且只返回范围内的注解。"""
    config = L10nHelperConfig(
        use_default_patterns=False,
        custom_patterns=[{"pattern": r"tr\(\s*(\w+)\s*\)"}],
    )
    context = HelperContext(config=config, store=store)
    index = LineIndex("tr(\n  ok_button\n)\ntr(cancel_button)\n")

    assert context.annotate_lines(index, 2, 3) == []
    assert context.annotate_lines(index, 2, 3, margin=3) == [
        Annotation(line=2, column=1, label="OK")
    ]
    assert context.annotate_lines(index, 2, 4, margin=3) == [
        Annotation(line=2, column=1, label="OK"),
        Annotation(line=3, column=17, label="Cancel"),
    ]


def test_annotate_lines_margin_rejects_overlong_match(store: TranslationStore) -> None:
    config = L10nHelperConfig(
        use_default_patterns=False,
        custom_patterns=[{"pattern": r"tr\(\s*(\w+)\s*\)"}],
    )
    context = HelperContext(config=config, store=store)
    index = LineIndex("tr(\n\n\n\n  ok_button)\n")

    with pytest.raises(WindowOverflowError):
        context.annotate_lines(index, 4, 5, margin=4)
    assert context.annotate_lines(index, 4, 5, margin=10) == [
        Annotation(line=4, column=12, label="OK")
    ]


@pytest.mark.asyncio
async def test_locale_fragment_selects_resource_file(tmp_path: Path) -> None:
    """测试非标准的语言代码片段（如 intl_ja）同样按文件名子串选中资源文件。"""
    write_resource(tmp_path / "l10n", "intl_ja.arb", {"ok_button": "了解"})
    config = L10nHelperConfig(
        project_root=tmp_path, resource_directory="l10n", preferred_locale="intl_ja"
    )
    context = HelperContext(config=config)

    report = await context.reload()

    assert report.ok
    assert context.annotate_text("context.l10n.ok_button") == [
        Annotation(line=0, column=22, label="了解")
    ]
