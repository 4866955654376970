"""按路径缓存解析结果，文件大小或修改时间变化时失效。"""

from __future__ import annotations

import logging
import threading
from os import PathLike
from pathlib import Path
from typing import Callable, Optional, Union

from wad_inspector.core.models import ArchiveInfo
from wad_inspector.parsing.dispatcher import parse, resolve_archive_path

LOGGER = logging.getLogger(__name__)

Parser = Callable[[Path], ArchiveInfo]
_Stamp = tuple[int, int]


def _stamp(path: Path) -> Optional[_Stamp]:
    try:
        stat = path.stat()
    except (OSError, ValueError):
        return None
    return stat.st_size, stat.st_mtime_ns


class ArchiveInfoCache:
    """线程安全的 ArchiveInfo 缓存，可供界面层或批处理复用。"""

    def __init__(self, parser: Parser = parse) -> None:
        self._parser = parser
        self._entries: dict[Path, tuple[Optional[_Stamp], ArchiveInfo]] = {}
        self._lock = threading.Lock()

    def get(self, path: Union[str, PathLike]) -> ArchiveInfo:
        key = resolve_archive_path(path)
        if key is None:
            # 无法解析的路径不入缓存
            return self._parser(Path(path))

        stamp = _stamp(key)
        with self._lock:
            cached = self._entries.get(key)
        if cached is not None and cached[0] == stamp:
            return cached[1]

        LOGGER.debug("缓存未命中：%s", key)
        info = self._parser(key)
        with self._lock:
            self._entries[key] = (stamp, info)
        return info

    def put(self, info: ArchiveInfo) -> None:
        """登记在别处（例如工作进程中）得到的解析结果。"""

        with self._lock:
            self._entries[info.path] = (_stamp(info.path), info)

    def invalidate(self, path: Union[str, PathLike]) -> None:
        key = resolve_archive_path(path)
        if key is None:
            return
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, PathLike)):
            return False
        key = resolve_archive_path(path)
        if key is None:
            return False
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
