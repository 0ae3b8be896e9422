# tests/conftest.py
"""项目全局共享的测试 Fixtures。"""

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from pytest_mock import MockerFixture
from rich.console import Console

from l10n_helper.config import L10nHelperConfig
from l10n_helper.context import HelperContext
from l10n_helper.store import TranslationStore

from tests.helpers.resources import EN_RESOURCE, JA_RESOURCE, write_resource


@pytest.fixture(scope="session", autouse=True)
def disable_rich_colors_for_tests(
    session_mocker: MockerFixture,
) -> Generator[None, None, None]:
    """全局禁用 rich 库的颜色输出，以确保测试结果的确定性。"""
    original_init = Console.__init__

    def new_init(self: Console, *args: Any, **kwargs: Any) -> None:
        kwargs["force_terminal"] = False
        kwargs["color_system"] = None
        kwargs.setdefault("width", 200)
        original_init(self, *args, **kwargs)

    session_mocker.patch("rich.console.Console.__init__", new=new_init)
    yield


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """提供一个包含 en / ja 两个 ARB 文件的临时项目目录。"""
    strings = tmp_path / "assets" / "strings"
    write_resource(strings, "app_en.arb", EN_RESOURCE)
    write_resource(strings, "app_ja.arb", JA_RESOURCE)
    return tmp_path


@pytest.fixture
def config(project_root: Path) -> L10nHelperConfig:
    """指向临时项目、使用极短防抖间隔的配置。"""
    return L10nHelperConfig(project_root=project_root, debounce_delay=0.01)


@pytest.fixture
def store() -> TranslationStore:
    """一个已填充 ja 译文的翻译缓存（不经过文件 I/O）。"""
    return TranslationStore(
        {k: v for k, v in JA_RESOURCE.items() if not k.startswith("@") and isinstance(v, str)}
    )


@pytest.fixture
def context(config: L10nHelperConfig, store: TranslationStore) -> HelperContext:
    return HelperContext(config=config, store=store)
