"""批量检查任务的配置模型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from wad_inspector.core.exceptions import InvalidConfigurationError

DEFAULT_EXTENSIONS = (".wad", ".pk3", ".pk7", ".ipk3", ".zip")


@dataclass(slots=True)
class ScanConfig:
    """单次批量检查任务的配置集合。"""

    sources: Sequence[Path]
    allow_recursive: bool = True
    include_extensions: Sequence[str] = field(default_factory=lambda: DEFAULT_EXTENSIONS)
    exclude_patterns: Sequence[str] = field(default_factory=tuple)
    max_workers: int = 1
    report_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise InvalidConfigurationError(f"并发数量必须大于 0: {self.max_workers}")
        for ext in self.include_extensions:
            if not ext.startswith(".") or len(ext) < 2:
                raise InvalidConfigurationError(f"扩展名必须以 '.' 开头: {ext!r}")
        self.include_extensions = tuple(ext.lower() for ext in self.include_extensions)
