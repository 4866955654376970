"""ZIP 包（PK3）扫描：识别 maps/ 目录下的地图与内嵌 WAD。"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Optional

from wad_inspector.core.exceptions import BadPackageError
from wad_inspector.core.models import ArchiveInfo, ArchiveKind
from wad_inspector.parsing.flat import FLAT_EXTENSION, scan_flat_maps
from wad_inspector.parsing.maps import is_map_marker, sort_map_names

LOGGER = logging.getLogger(__name__)

PACKAGE_EXTENSIONS = {".pk3", ".pk7", ".ipk3", ".zip"}
ZIP_MAGIC = b"PK"
MAPS_PREFIX = "MAPS/"
TEXTMAP_SUFFIX = "/TEXTMAP"

# zipfile 在中央目录损坏时可能抛出的异常
_STRUCTURE_ERRORS = (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, ValueError)


def _package_failure_message(fallback_signature: Optional[str]) -> str:
    message = str(BadPackageError())
    if fallback_signature is not None:
        message += f" (unrecognized flat-archive signature {fallback_signature!r})"
    return message


def _map_from_entry(
    archive: zipfile.ZipFile, entry: zipfile.ZipInfo, package_path: Path
) -> list[str]:
    """按优先级规则识别单个条目对应的地图名称。"""

    name = entry.filename.replace("\\", "/").upper()
    leaf = name.rsplit("/", 1)[-1]
    is_flat = not entry.is_dir() and leaf.endswith(FLAT_EXTENSION)

    if name.startswith(MAPS_PREFIX) and is_flat:
        candidate = leaf[: -len(FLAT_EXTENSION)]
        return [candidate] if is_map_marker(candidate) else []

    if name.startswith(MAPS_PREFIX) and name.endswith(TEXTMAP_SUFFIX):
        candidate = name.split("/")[1]
        return [candidate] if is_map_marker(candidate) else []

    if is_flat:
        try:
            return list(scan_flat_maps(archive.read(entry)))
        except Exception as exc:  # noqa: BLE001
            LOGGER.debug("忽略无法解析的内嵌 WAD %s!%s：%s", package_path, entry.filename, exc)
    return []


def parse_package(
    path: Path,
    byte_size: Optional[int] = None,
    fallback_signature: Optional[str] = None,
) -> ArchiveInfo:
    """解析 ZIP 兼容的包文件。

    ``fallback_signature`` 非空表示这是扁平归档签名识别失败后的回退解析，
    包解析也失败时会把原签名附在错误信息中。
    """

    if byte_size is None:
        byte_size = path.stat().st_size

    try:
        archive = zipfile.ZipFile(path)
    except _STRUCTURE_ERRORS as exc:
        LOGGER.debug("无法作为 ZIP 打开 %s：%s", path, exc)
        return ArchiveInfo.failure(path, _package_failure_message(fallback_signature), byte_size=byte_size)

    found: list[str] = []
    with archive:
        entries = archive.infolist()
        for entry in entries:
            found.extend(_map_from_entry(archive, entry, path))

    map_names = sort_map_names(found)
    LOGGER.debug("%s：%d 个条目，%d 张地图", path, len(entries), len(map_names))
    return ArchiveInfo(
        path=path,
        archive_kind=ArchiveKind.PACKAGE,
        byte_size=byte_size,
        entry_count=len(entries),
        map_names=map_names,
        is_valid=True,
    )
