"""解析入口：按扩展名与文件头分派到扁平归档或包解析器。"""

from __future__ import annotations

import logging
from os import PathLike
from pathlib import Path
from typing import Optional, Union

from wad_inspector.core.exceptions import BadSignatureError, ErrorKind
from wad_inspector.core.models import ArchiveInfo
from wad_inspector.parsing.flat import parse_flat
from wad_inspector.parsing.package import PACKAGE_EXTENSIONS, ZIP_MAGIC, parse_package

LOGGER = logging.getLogger(__name__)


def _parse_existing(path: Path) -> ArchiveInfo:
    byte_size = path.stat().st_size

    if path.suffix.lower() in PACKAGE_EXTENSIONS:
        return parse_package(path, byte_size=byte_size)

    with path.open("rb") as handle:
        magic = handle.read(len(ZIP_MAGIC))
        if magic == ZIP_MAGIC:
            LOGGER.debug("%s 扩展名不是包格式，但文件头为 ZIP，改用包解析", path.name)
        else:
            handle.seek(0)
            try:
                return parse_flat(handle, path)
            except BadSignatureError as exc:
                LOGGER.debug("%s：%s，尝试按包解析", path.name, exc)
                return parse_package(path, byte_size=byte_size, fallback_signature=exc.signature)

    return parse_package(path, byte_size=byte_size)


def resolve_archive_path(path: Union[str, PathLike]) -> Optional[Path]:
    """展开并规范化路径；名称过长或含 NUL 等无法解析的路径返回 None。"""

    try:
        return Path(path).expanduser().resolve()
    except (OSError, ValueError, RuntimeError) as exc:
        LOGGER.debug("无法解析路径 %r：%s", path, exc)
        return None


def _is_existing_file(path: Path) -> bool:
    try:
        return path.is_file()
    except (OSError, ValueError) as exc:
        LOGGER.debug("无法访问 %s：%s", path, exc)
        return False


def parse(path: Union[str, PathLike]) -> ArchiveInfo:
    """解析单个资源文件，任何异常都会转换为无效的 ArchiveInfo 返回。"""

    resolved = resolve_archive_path(path)
    if resolved is None:
        return ArchiveInfo.failure(Path(path), ErrorKind.NOT_FOUND.value)
    if not _is_existing_file(resolved):
        return ArchiveInfo.failure(resolved, ErrorKind.NOT_FOUND.value)

    try:
        info = _parse_existing(resolved)
    except Exception as exc:  # noqa: BLE001
        LOGGER.debug("解析 %s 时出现异常", resolved, exc_info=True)
        return ArchiveInfo.failure(resolved, f"{ErrorKind.GENERIC.value}: {exc}")

    if not info.is_valid:
        LOGGER.debug("%s 无效：%s", resolved, info.error_message)
    return info
