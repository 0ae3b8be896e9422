# l10n_helper/cli/__init__.py
"""l10n-helper 命令行入口。"""

from l10n_helper.cli.main import app

__all__ = ["app"]
