"""资源文件扫描与筛选逻辑。"""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path
from typing import Iterator, Sequence

from wad_inspector.core.config import ScanConfig
from wad_inspector.core.models import ArchiveSource


def _iter_candidate_files(path: Path, recursive: bool) -> Iterator[Path]:
    """遍历路径下的所有文件。"""

    if path.is_file():
        yield path
        return

    if not path.is_dir():
        return

    iterator = path.rglob("*") if recursive else path.glob("*")
    for candidate in iterator:
        if candidate.is_file():
            yield candidate


def _matches_any(name: str, patterns: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(fnmatch(lowered, pattern.lower()) for pattern in patterns)


def collect_archive_files(config: ScanConfig) -> list[ArchiveSource]:
    """根据配置扫描数据目录，返回候选资源文件列表（按相对路径不区分大小写排序）。"""

    collected: list[ArchiveSource] = []
    seen_paths: set[Path] = set()

    for root in config.sources:
        resolved_root = root.expanduser().resolve()
        base = resolved_root if resolved_root.is_dir() else resolved_root.parent
        for candidate in _iter_candidate_files(resolved_root, config.allow_recursive):
            if candidate in seen_paths:
                continue
            seen_paths.add(candidate)

            if candidate.suffix.lower() not in config.include_extensions:
                continue
            if config.exclude_patterns and _matches_any(candidate.name, config.exclude_patterns):
                continue

            collected.append(
                ArchiveSource(
                    source_path=candidate,
                    root=base,
                    relative_path=candidate.relative_to(base),
                )
            )

    collected.sort(key=lambda item: str(item.relative_path).lower())
    return collected
