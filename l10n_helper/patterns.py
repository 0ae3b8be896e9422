# l10n_helper/patterns.py
"""
本模块负责构建生效的提取规则目录（PatternCatalog）。

规则来源依次为：内置默认规则（可关闭）、用户自定义规则。每条基础规则之后
紧跟一条自动派生的“命名参数前缀”规则，使 `label: l10n.ok` 这类写法同样可以命中。
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog
from cachetools import LRUCache

from l10n_helper.config import PatternSpec
from l10n_helper.exceptions import ConfigParseError
from l10n_helper.types import ExtractionRule

if TYPE_CHECKING:
    from l10n_helper.config import L10nHelperConfig

logger = structlog.get_logger(__name__)

PATTERN_FLAGS = re.MULTILINE | re.DOTALL

# 标识符 + 冒号，例如 `label: `；自身占用一个捕获组
NAMED_ARGUMENT_PREFIX = r"(\w+)\s*:\s*"

DEFAULT_PATTERNS: tuple[PatternSpec, ...] = (
    PatternSpec(pattern=r"context\.l10n\.(\w+)", capture_group=1),
    PatternSpec(
        pattern=r"(?:AppLocalizations|L10n|S)\.of\(\s*context\s*\)!?\.(\w+)",
        capture_group=1,
    ),
    PatternSpec(pattern=r"(?<![\w.])l10n\.(\w+)", capture_group=1),
)


def compile_rule(spec: PatternSpec, *, derived: bool = False) -> ExtractionRule:
    """
    将 PatternSpec 编译为 ExtractionRule。

    Raises:
        ConfigParseError: 正则语法错误，或捕获组序号超出正则中的分组数量。
    """
    try:
        compiled = re.compile(spec.pattern, PATTERN_FLAGS)
    except re.error as e:
        raise ConfigParseError(f"正则语法错误: {e}", pattern=spec.pattern) from e
    if spec.capture_group > compiled.groups:
        raise ConfigParseError(
            f"捕获组 {spec.capture_group} 超出范围（共 {compiled.groups} 个分组）",
            pattern=spec.pattern,
        )
    return ExtractionRule(
        pattern=compiled, capture_group=spec.capture_group, derived=derived
    )


def derive_prefixed(spec: PatternSpec) -> PatternSpec:
    """在基础规则前添加命名参数前缀，捕获组序号随之后移一位。"""
    return PatternSpec(
        pattern=NAMED_ARGUMENT_PREFIX + spec.pattern,
        capture_group=spec.capture_group + 1,
    )


class PatternCatalog:
    """规则目录的构建器，按配置指纹缓存构建结果。"""

    def __init__(self, maxsize: int = 32):
        self._cache: LRUCache[
            tuple[bool, tuple[PatternSpec, ...]], tuple[ExtractionRule, ...]
        ] = LRUCache(maxsize=maxsize)

    def build(
        self, defaults_enabled: bool, custom_rules: Iterable[PatternSpec]
    ) -> list[ExtractionRule]:
        """构建规则列表。无法编译的规则被丢弃并记录日志，不会中止整个构建。"""
        base_specs = [*(DEFAULT_PATTERNS if defaults_enabled else ()), *custom_rules]
        rules: list[ExtractionRule] = []
        for spec in base_specs:
            try:
                rules.append(compile_rule(spec))
            except ConfigParseError as e:
                logger.warning("已跳过无效的提取规则。", pattern=e.pattern, error=str(e))
                continue
            try:
                rules.append(compile_rule(derive_prefixed(spec), derived=True))
            except ConfigParseError as e:
                logger.warning(
                    "无法为规则派生命名参数前缀版本。", pattern=spec.pattern, error=str(e)
                )

        logger.debug(
            "提取规则目录已构建。",
            base=len(base_specs),
            total=len(rules),
            defaults=defaults_enabled,
        )
        return rules

    def rules_for(self, config: "L10nHelperConfig") -> tuple[ExtractionRule, ...]:
        """返回与配置对应的规则；只在规则相关配置变化时重建。"""
        key = config.pattern_fingerprint
        cached = self._cache.get(key)
        if cached is None:
            cached = tuple(self.build(*key))
            self._cache[key] = cached
        return cached

    def invalidate(self) -> None:
        self._cache.clear()
