"""并发检查的工作单元。"""

from __future__ import annotations

from dataclasses import dataclass

from wad_inspector.core.models import ArchiveSource, FileOutcome
from wad_inspector.parsing.dispatcher import parse


@dataclass(slots=True)
class InspectionTask:
    """描述单个文件的检查任务。"""

    source: ArchiveSource


def run_task(task: InspectionTask) -> FileOutcome:
    """在工作进程中解析单个文件；parse 不会抛出异常。"""

    return FileOutcome(source=task.source, info=parse(task.source.source_path))
