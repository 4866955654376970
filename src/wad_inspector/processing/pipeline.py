"""检查流水线：扫描数据目录、解析资源文件、分类并输出报告。"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Callable, Optional

from wad_inspector.core.cache import ArchiveInfoCache
from wad_inspector.core.config import ScanConfig
from wad_inspector.core.exceptions import ErrorKind
from wad_inspector.core.models import ArchiveInfo, BatchResult, FileOutcome
from wad_inspector.core.progress import ProgressUpdate
from wad_inspector.core.report import write_csv_report
from wad_inspector.core.scanner import collect_archive_files
from wad_inspector.processing.worker import InspectionTask, run_task

LOGGER = logging.getLogger(__name__)


ProgressCallback = Optional[Callable[[ProgressUpdate], None]]


def inspect_batch(
    config: ScanConfig,
    progress_callback: ProgressCallback = None,
    cache: Optional[ArchiveInfoCache] = None,
) -> BatchResult:
    """批量检查入口：扫描、解析并按基础游戏 / 模组分类。"""

    LOGGER.info("开始扫描数据目录")
    sources = collect_archive_files(config)
    total = len(sources)
    LOGGER.info("发现 %d 个候选资源文件", total)

    result = BatchResult()
    if total == 0:
        _emit_progress(progress_callback, completed=0, total=0, message="没有需要检查的文件")
        _write_report(config, result)
        return result

    tasks = [InspectionTask(source=source) for source in sources]
    outcomes: list[Optional[FileOutcome]] = [None] * total
    completed = 0
    _emit_progress(progress_callback, completed, total, "开始解析资源文件")

    if config.max_workers <= 1:
        for index, task in enumerate(tasks):
            if cache is not None:
                outcome = FileOutcome(source=task.source, info=cache.get(task.source.source_path))
            else:
                outcome = run_task(task)
            outcomes[index] = outcome
            completed += 1
            _emit_progress(progress_callback, completed, total, f"完成 {task.source.relative_path}")
    else:
        with ProcessPoolExecutor(max_workers=config.max_workers) as executor:
            future_map = {executor.submit(run_task, task): index for index, task in enumerate(tasks)}
            for future in as_completed(future_map):
                index = future_map[future]
                task = tasks[index]
                try:
                    outcome = future.result()
                except Exception as exc:  # noqa: BLE001
                    LOGGER.exception("任务执行异常：%s", exc)
                    outcome = FileOutcome(
                        source=task.source,
                        info=ArchiveInfo.failure(
                            task.source.source_path, f"{ErrorKind.GENERIC.value}: {exc}"
                        ),
                    )
                else:
                    if cache is not None:
                        cache.put(outcome.info)
                outcomes[index] = outcome
                completed += 1
                _emit_progress(progress_callback, completed, total, f"完成 {task.source.relative_path}")

    # 结果按扫描顺序归类，与完成顺序无关
    for outcome in outcomes:
        assert outcome is not None
        _record_outcome(outcome, result)

    LOGGER.info(
        "检查完成：基础游戏 %d 个，模组 %d 个，其中无效 %d 个",
        len(result.base_games),
        len(result.mods),
        len(result.failed),
    )
    _write_report(config, result)
    _emit_progress(progress_callback, total, total, "检查完成")
    return result


def _record_outcome(outcome: FileOutcome, result: BatchResult) -> None:
    if outcome.info.is_primary:
        result.base_games.append(outcome)
        return
    # 无法解析的文件仍列为模组，由用户自行判断
    result.mods.append(outcome)
    if not outcome.info.is_valid:
        result.failed.append(outcome)


def _emit_progress(
    callback: ProgressCallback,
    completed: int,
    total: int,
    message: Optional[str] = None,
) -> None:
    if not callback:
        return
    callback(ProgressUpdate(total=total, completed=completed, message=message))


def _write_report(config: ScanConfig, result: BatchResult) -> None:
    if config.report_path is None:
        return
    try:
        result.report_path = write_csv_report(result.all_outcomes(), config.report_path)
    except OSError as exc:
        LOGGER.error("写入报告失败：%s", exc)
