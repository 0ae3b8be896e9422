# l10n_helper/cli/main.py
"""l10n-helper CLI 的主入口点。"""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

import l10n_helper
from l10n_helper.cli.state import State
from l10n_helper.config import load_config
from l10n_helper.exceptions import ConfigurationError
from l10n_helper.logging_config import setup_logging_from_config

app = typer.Typer(
    name="l10n-helper",
    help="🔤 l10n-helper: 在源码中预览本地化键对应的译文。",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """处理 --version 选项的回调函数。"""
    if value:
        console.print(f"l10n-helper [bold cyan]v{l10n_helper.__version__}[/bold cyan]")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="显示版本信息并退出。",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    settings: Annotated[
        Path | None,
        typer.Option("--settings", "-s", help="编辑器设置文件（l10nHelper.* 键）。"),
    ] = None,
    project_root: Annotated[
        Path | None, typer.Option("--project-root", help="项目根目录。")
    ] = None,
    resource_dir: Annotated[
        str | None,
        typer.Option("--resource-dir", "-d", help="相对项目根目录的 ARB 目录。"),
    ] = None,
    locale: Annotated[
        str | None, typer.Option("--locale", "-l", help="优先使用的语言代码。")
    ] = None,
) -> None:
    """主回调函数：加载配置并初始化日志，然后把状态存入上下文。"""
    try:
        config = load_config(
            settings,
            project_root=project_root,
            resource_directory=resource_dir,
            preferred_locale=locale,
        )
        setup_logging_from_config(config)
        ctx.obj = State(config=config)
    except ConfigurationError as e:
        console.print("[bold red]❌ 启动失败：无法加载配置。[/bold red]")
        console.print(f"[dim]{e}[/dim]")
        raise typer.Exit(code=1) from e


def _state(ctx: typer.Context) -> State:
    state: State = ctx.obj
    context = state.context()
    report = state.report
    if report is not None and not report.ok:
        console.print(f"[yellow]⚠️ 翻译资源加载失败：{report.error}[/yellow]")
    elif context.store.source_file is not None:
        console.print(
            f"[dim]使用 {context.store.source_file.name}（{len(context.store)} 条翻译）[/dim]"
        )
    return state


@app.command()
def annotate(
    ctx: typer.Context,
    file: Annotated[
        Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="要扫描的源文件。")
    ],
    max_length: Annotated[
        int | None, typer.Option("--max-length", "-m", min=1, help="单段译文的最大长度。")
    ] = None,
) -> None:
    """对文件做一次全量扫描，并列出每行的译文注解。"""
    state = _state(ctx)
    context = state.context()
    if max_length is not None:
        context.config = context.config.model_copy(update={"max_text_length": max_length})

    text = file.read_text(encoding="utf-8")
    annotations = context.annotate_text(text)
    if not annotations:
        console.print("[yellow]未找到可解析的本地化键。[/yellow]")
        return

    lines = text.splitlines()
    table = Table(title=str(file), show_lines=False)
    table.add_column("行", justify="right", style="cyan")
    table.add_column("源码", overflow="fold")
    table.add_column("译文", style="italic green")
    for annotation in annotations:
        source = lines[annotation.line] if annotation.line < len(lines) else ""
        table.add_row(str(annotation.line + 1), source.strip(), annotation.label)
    console.print(table)


@app.command()
def lookup(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="本地化键。")],
) -> None:
    """输出某个键在当前语言下的译文。"""
    context = _state(ctx).context()
    value = context.store.lookup(key)
    if value is None:
        console.print(f"[red]❌ 未找到键：{key}[/red]")
        raise typer.Exit(code=1)
    console.print(value, markup=False, highlight=False)


@app.command()
def keys(ctx: typer.Context) -> None:
    """列出当前语言的全部键与译文。"""
    context = _state(ctx).context()
    table = Table(show_header=True)
    table.add_column("键", style="cyan")
    table.add_column("译文", overflow="fold")
    for key, value in sorted(context.store.items()):
        table.add_row(key, value)
    console.print(table)


@app.command()
def patterns(ctx: typer.Context) -> None:
    """列出生效的提取规则（包括派生的命名参数规则）。"""
    state: State = ctx.obj
    context = state.context()
    table = Table(show_header=True)
    table.add_column("#", justify="right")
    table.add_column("正则", overflow="fold")
    table.add_column("捕获组", justify="right")
    table.add_column("派生")
    for number, rule in enumerate(context.rules(), start=1):
        table.add_row(str(number), rule.source, str(rule.capture_group), "✓" if rule.derived else "")
    console.print(table)
