"""核心数据模型定义。"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from wad_inspector.utils.formatting import format_byte_size

MAP_LIST_PREVIEW = 5


class ArchiveKind(str, Enum):
    """归档类型：基础游戏数据、补丁数据、ZIP 包或无法识别。"""

    PRIMARY = "IWAD"
    PATCH = "PWAD"
    PACKAGE = "PK3"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class ArchiveInfo:
    """单个归档文件的解析结果，构造后不可修改。

    ``map_names`` 由解析器排序并去重后传入；无效结果必须携带错误信息且不含地图。
    """

    path: Path
    archive_kind: ArchiveKind = ArchiveKind.UNKNOWN
    byte_size: int = 0
    entry_count: int = 0
    map_names: tuple[str, ...] = ()
    is_valid: bool = False
    error_message: str = ""

    def __post_init__(self) -> None:
        if self.is_valid:
            if self.error_message:
                raise ValueError("valid ArchiveInfo must not carry an error message")
            return
        if not self.error_message:
            raise ValueError("invalid ArchiveInfo requires an error message")
        if self.map_names:
            raise ValueError("invalid ArchiveInfo must not list maps")

    @classmethod
    def failure(
        cls,
        path: Path,
        message: str,
        *,
        archive_kind: ArchiveKind = ArchiveKind.UNKNOWN,
        byte_size: int = 0,
        entry_count: int = 0,
    ) -> "ArchiveInfo":
        """构造一个无效结果。"""

        return cls(
            path=path,
            archive_kind=archive_kind,
            byte_size=byte_size,
            entry_count=entry_count,
            is_valid=False,
            error_message=message,
        )

    @property
    def file_name(self) -> str:
        return self.path.name

    @property
    def map_count(self) -> int:
        return len(self.map_names)

    @property
    def is_primary(self) -> bool:
        return self.is_valid and self.archive_kind is ArchiveKind.PRIMARY

    @property
    def file_size_formatted(self) -> str:
        return format_byte_size(self.byte_size)

    @property
    def summary(self) -> str:
        """一行摘要；无效时直接返回错误信息。"""

        if not self.is_valid:
            return self.error_message
        if self.map_count:
            maps = f"{self.map_count} map{'s' if self.map_count != 1 else ''}"
        else:
            maps = "No maps"
        return f"{self.archive_kind.value} | {self.file_size_formatted} | {maps}"

    @property
    def map_list_summary(self) -> str:
        if not self.map_names:
            return ""
        if self.map_count <= MAP_LIST_PREVIEW:
            return ", ".join(self.map_names)
        shown = ", ".join(self.map_names[:MAP_LIST_PREVIEW])
        return f"{shown} (+{self.map_count - MAP_LIST_PREVIEW} more)"

    def to_dict(self) -> dict:
        """转换为可 JSON 序列化的字典。"""

        return {
            "path": str(self.path),
            "archive_kind": self.archive_kind.value,
            "byte_size": self.byte_size,
            "entry_count": self.entry_count,
            "map_names": list(self.map_names),
            "is_valid": self.is_valid,
            "error_message": self.error_message,
        }


@dataclass(slots=True)
class ArchiveSource:
    """扫描阶段得到的候选归档文件。"""

    source_path: Path
    root: Path
    relative_path: Path


@dataclass(slots=True)
class FileOutcome:
    """单个文件的检查结果（用于报告/日志）。"""

    source: ArchiveSource
    info: ArchiveInfo

    @property
    def status(self) -> str:
        if not self.info.is_valid:
            return "error"
        return "base-game" if self.info.is_primary else "mod"


@dataclass(slots=True)
class BatchResult:
    """批量检查的产出，分类方式与启动器的基础游戏/模组列表一致。"""

    base_games: list[FileOutcome] = field(default_factory=list)
    mods: list[FileOutcome] = field(default_factory=list)
    failed: list[FileOutcome] = field(default_factory=list)
    report_path: Optional[Path] = None

    def all_outcomes(self) -> list[FileOutcome]:
        """返回所有结果记录（失败项同时位于 mods 中，不重复计入）。"""

        outcomes = [*self.base_games, *self.mods]
        outcomes.sort(key=lambda item: str(item.source.relative_path).lower())
        return outcomes
