# l10n_helper/config.py
"""
l10n-helper 配置（Pydantic v2）

- `L10nHelperConfig` 是唯一的配置模型，可由环境变量（前缀 `L10N_HELPER_`）、
  构造参数或编辑器设置文件（`l10nHelper.*` 键）填充。
- 自定义提取规则逐条校验：格式错误的条目被丢弃并记录日志，不影响其余配置。
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Literal

import structlog
from langcodes import Language
from langcodes.tag_parser import LanguageTagError
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from l10n_helper.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

SETTINGS_SECTION = "l10nHelper"

# 旧版本配置中的 type 字段到捕获组序号的映射
_LEGACY_GROUP_TYPES = {"firstGroup": 1, "secondGroup": 2}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# 语言子标签应该由 2-3 个字母组成 (BCP 47)
LANGUAGE_SUBTAG_PATTERN = re.compile(r"^[a-zA-Z]{2,3}$")


class PatternSpec(BaseModel):
    """用户配置的一条提取规则：`{pattern, captureGroup?}`。"""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    pattern: str = Field(min_length=1)
    capture_group: int = Field(default=1, ge=1, alias="captureGroup")

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_type(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "captureGroup" in data or "capture_group" in data:
            return data
        legacy = data.get("type")
        if legacy in _LEGACY_GROUP_TYPES:
            data = {**data, "capture_group": _LEGACY_GROUP_TYPES[legacy]}
        return data


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "console"] = "console"


class L10nHelperConfig(BaseSettings):
    """l10n-helper 核心配置模型。"""

    model_config = SettingsConfigDict(
        env_prefix="L10N_HELPER_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        env_file_encoding="utf-8",
    )

    enabled: bool = True
    project_root: Path = Path(".")
    resource_directory: str = "assets/strings"
    resource_extension: str = ".arb"
    preferred_locale: str = "ja"
    max_text_length: int = Field(default=20, ge=1)
    use_default_patterns: bool = True
    custom_patterns: list[PatternSpec] = Field(default_factory=list)
    dedupe: Literal["exact", "containment"] = "exact"

    debounce_delay: float = Field(
        default=0.3, ge=0, description="编辑后触发重新扫描前的防抖间隔（秒）"
    )
    partial_threshold: int = Field(
        default=3, ge=1, description="一次编辑突发中少于该数量的操作时使用局部扫描"
    )
    language_ids: list[str] = Field(default_factory=lambda: ["dart"])
    pattern_cache_size: int = Field(default=32, gt=0)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # --- 校验器 ---
    @field_validator("preferred_locale")
    @classmethod
    def _validate_locale(cls, v: str) -> str:
        # 语言代码按子串匹配资源文件名，不合规的标签只记录警告
        v = v.strip()
        if not v:
            raise ValueError("preferred_locale 不能为空。")
        # ARB 文件名常用下划线（app_zh_Hant.arb），校验时按 BCP 47 规范化
        try:
            lang = Language.get(v.replace("_", "-"))
            valid = bool(lang.language) and bool(LANGUAGE_SUBTAG_PATTERN.match(lang.language))
        except LanguageTagError:
            valid = False
        if not valid:
            logger.warning("语言代码不是合法的 BCP 47 标签，将按文件名子串匹配。", locale=v)
        return v

    @field_validator("resource_extension")
    @classmethod
    def _normalize_extension(cls, v: str) -> str:
        return v if v.startswith(".") else f".{v}"

    @field_validator("custom_patterns", mode="before")
    @classmethod
    def _drop_malformed_patterns(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return v
        accepted: list[PatternSpec] = []
        for index, raw in enumerate(v):
            try:
                accepted.append(PatternSpec.model_validate(raw))
            except ValidationError as e:
                logger.warning(
                    "忽略格式错误的自定义规则。",
                    index=index,
                    entry=raw,
                    errors=e.error_count(),
                )
        return accepted

    @property
    def resource_path(self) -> Path:
        return self.project_root / self.resource_directory

    @property
    def pattern_fingerprint(self) -> tuple[bool, tuple[PatternSpec, ...]]:
        """用于缓存规则目录的键：只包含影响规则构建的字段。"""
        return self.use_default_patterns, tuple(self.custom_patterns)

    @property
    def resource_fingerprint(self) -> tuple[Path, str, str]:
        return self.resource_path, self.resource_extension, self.preferred_locale


def _snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _extract_section(raw: dict[str, Any]) -> dict[str, Any]:
    """支持 `"l10nHelper.maxTextLength": 30` 与 `"l10nHelper": {...}` 两种写法。"""
    values: dict[str, Any] = {}
    nested = raw.get(SETTINGS_SECTION)
    if isinstance(nested, dict):
        values.update({_snake_case(k): v for k, v in nested.items()})
    prefix = f"{SETTINGS_SECTION}."
    for key, value in raw.items():
        if key.startswith(prefix):
            values[_snake_case(key[len(prefix):])] = value
    return values


def load_config(
    settings_file: Path | None = None, **overrides: Any
) -> L10nHelperConfig:
    """
    加载配置：环境变量 < 设置文件 < 显式覆盖参数。

    Raises:
        ConfigurationError: 设置文件无法读取、不是 JSON 对象，或配置值非法。
    """
    values: dict[str, Any] = {}
    if settings_file is not None:
        try:
            raw = json.loads(settings_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"无法读取设置文件 {settings_file}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigurationError(f"设置文件 {settings_file} 的顶层必须是对象。")
        values.update(_extract_section(raw))
    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return L10nHelperConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"配置校验失败: {e}") from e
