"""报告生成工具。"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from wad_inspector.core.models import FileOutcome

HEADER = [
    "relative_path",
    "source_path",
    "status",
    "archive_kind",
    "byte_size",
    "entry_count",
    "map_count",
    "map_names",
    "error_message",
]


def write_csv_report(outcomes: Iterable[FileOutcome], report_path: Path) -> Path:
    """将检查结果写入 CSV 报告，地图列表以空格分隔。"""

    report_path.parent.mkdir(parents=True, exist_ok=True)
    with report_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(HEADER)
        for record in outcomes:
            info = record.info
            writer.writerow(
                [
                    record.source.relative_path.as_posix(),
                    str(record.source.source_path),
                    record.status,
                    info.archive_kind.value,
                    info.byte_size,
                    info.entry_count,
                    info.map_count,
                    " ".join(info.map_names),
                    info.error_message,
                ]
            )
    return report_path
