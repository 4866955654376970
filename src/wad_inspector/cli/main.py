"""命令行入口。"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from wad_inspector.core.config import DEFAULT_EXTENSIONS, ScanConfig
from wad_inspector.core.exceptions import InvalidConfigurationError
from wad_inspector.core.models import ArchiveInfo, FileOutcome
from wad_inspector.core.progress import ProgressUpdate
from wad_inspector.parsing.dispatcher import parse
from wad_inspector.parsing.maps import is_map_marker, normalize_map_name, warp_arguments
from wad_inspector.processing.pipeline import inspect_batch
from wad_inspector.utils.logging import level_for, setup_logging

app = typer.Typer(help="DOOM 引擎资源文件（WAD / PK3）检查工具。")
console = Console()


def _build_progress_callback(progress: Progress):
    task_id: Optional[int] = None

    def callback(update: ProgressUpdate) -> None:
        nonlocal task_id
        if update.total == 0:
            return
        if task_id is None:
            task_id = progress.add_task("解析资源文件", total=update.total)
        progress.update(task_id, completed=update.completed)

    return callback


def _info_table(title: str, rows: List[tuple[str, ArchiveInfo]]) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("文件", overflow="fold")
    table.add_column("类型")
    table.add_column("大小", justify="right")
    table.add_column("条目", justify="right")
    table.add_column("地图")
    for label, info in rows:
        if info.is_valid:
            table.add_row(
                escape(label),
                info.archive_kind.value,
                info.file_size_formatted,
                str(info.entry_count),
                info.map_list_summary or "No maps",
            )
        else:
            table.add_row(
                escape(label),
                "[red]无效[/red]",
                info.file_size_formatted,
                "-",
                f"[red]{escape(info.error_message)}[/red]",
            )
    return table


def _outcome_rows(outcomes: List[FileOutcome]) -> List[tuple[str, ArchiveInfo]]:
    return [(outcome.source.relative_path.as_posix(), outcome.info) for outcome in outcomes]


@app.command("inspect")
def inspect_cli(
    paths: List[Path] = typer.Argument(..., help="要检查的资源文件，可指定多个"),
    show_maps: bool = typer.Option(False, "--maps", help="列出全部地图名称"),
    as_json: bool = typer.Option(False, "--json", help="以 JSON 输出结果"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    """解析单个或多个资源文件并输出摘要。"""

    setup_logging(level_for(verbose))
    results = [parse(path) for path in paths]

    if as_json:
        typer.echo(json.dumps([info.to_dict() for info in results], ensure_ascii=False, indent=2))
    else:
        console.print(_info_table("资源文件", [(info.file_name, info) for info in results]))
        if show_maps:
            for info in results:
                if info.map_names:
                    console.print(f"[bold]{escape(info.file_name)}[/bold]: {' '.join(info.map_names)}")

    if not all(info.is_valid for info in results):
        raise typer.Exit(code=1)


@app.command("scan")
def scan_cli(
    source: List[Path] = typer.Argument(..., help="数据目录或文件，可指定多个"),
    report: Optional[Path] = typer.Option(None, "--report", "-r", help="CSV 报告输出路径"),
    max_workers: int = typer.Option(1, "--workers", "-w", help="并发进程数量"),
    allow_recursive: bool = typer.Option(True, "--recursive/--no-recursive", help="是否递归扫描目录"),
    extension: Optional[List[str]] = typer.Option(
        None, "--ext", help=f"只检查指定扩展名，默认 {' '.join(DEFAULT_EXTENSIONS)}"
    ),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", help="排除的文件名模式 (fnmatch)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    """扫描数据目录，区分基础游戏 (IWAD) 与模组。"""

    setup_logging(level_for(verbose))
    logging.getLogger(__name__).debug("CLI 参数解析完成")

    try:
        config = ScanConfig(
            sources=[p.expanduser().resolve() for p in source],
            allow_recursive=allow_recursive,
            include_extensions=tuple(extension) if extension else DEFAULT_EXTENSIONS,
            exclude_patterns=tuple(exclude or ()),
            max_workers=max_workers,
            report_path=report.expanduser().resolve() if report else None,
        )
    except InvalidConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
    with progress:
        result = inspect_batch(config, progress_callback=_build_progress_callback(progress))

    console.print(_info_table("基础游戏", _outcome_rows(result.base_games)))
    console.print(_info_table("模组", _outcome_rows(result.mods)))
    typer.echo(
        f"检查完成：基础游戏 {len(result.base_games)} 个，模组 {len(result.mods)} 个，无效 {len(result.failed)} 个。"
    )
    if result.report_path is not None:
        typer.echo(f"报告文件：{result.report_path}")


@app.command("warp")
def warp_cli(map_name: str = typer.Argument(..., help="地图名称，例如 E1M1 或 MAP01")) -> None:
    """输出引擎跳关所需的 -warp 参数。"""

    map_name = normalize_map_name(map_name)
    if not is_map_marker(map_name):
        typer.echo(f"无法识别的地图名称: {map_name}", err=True)
        raise typer.Exit(code=2)
    typer.echo(" ".join(warp_arguments(map_name)))


if __name__ == "__main__":
    app()
