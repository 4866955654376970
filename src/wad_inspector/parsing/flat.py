"""扁平归档（WAD）解析。

文件布局::

    0..3   签名 "IWAD" / "PWAD"
    4..7   目录项数量 (u32 LE)
    8..11  目录偏移   (u32 LE)
    目录   每项 16 字节：数据偏移(4) 数据大小(4) 名称(8, NUL 填充)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from wad_inspector.core.exceptions import (
    BadDirectoryOffsetError,
    BadSignatureError,
    TooSmallError,
)
from wad_inspector.core.models import ArchiveInfo, ArchiveKind
from wad_inspector.parsing.cursor import ByteCursor, ByteSource
from wad_inspector.parsing.maps import is_map_marker, sort_map_names

LOGGER = logging.getLogger(__name__)

HEADER_SIZE = 12
DIRECTORY_ENTRY_SIZE = 16
LUMP_NAME_SIZE = 8
FLAT_EXTENSION = ".WAD"

SIGNATURES = {
    b"IWAD": ArchiveKind.PRIMARY,
    b"PWAD": ArchiveKind.PATCH,
}

IN_MEMORY_PATH = Path("<memory>")


@dataclass(slots=True)
class FlatHeader:
    kind: ArchiveKind
    entry_count: int
    directory_offset: int


def read_flat_header(cursor: ByteCursor) -> FlatHeader:
    """读取 12 字节文件头；签名不符时抛出 BadSignatureError 以便改走包扫描。"""

    if cursor.length < HEADER_SIZE:
        raise TooSmallError()

    signature = cursor.read_bytes(4)
    kind = SIGNATURES.get(signature)
    if kind is None:
        raise BadSignatureError(signature.decode("ascii", errors="replace"))

    entry_count = cursor.read_u32_le()
    directory_offset = cursor.read_u32_le()
    return FlatHeader(kind=kind, entry_count=entry_count, directory_offset=directory_offset)


def _directory_offset_valid(header: FlatHeader, length: int) -> bool:
    """目录偏移须落在 [12, length)，且之后至少容纳一条完整记录，与目录项数无关。"""

    offset = header.directory_offset
    return HEADER_SIZE <= offset and offset + DIRECTORY_ENTRY_SIZE <= length


def _collect_map_names(cursor: ByteCursor, header: FlatHeader) -> tuple[str, ...]:
    """遍历目录收集地图标记。目录被截断时静默提前结束。"""

    cursor.seek(header.directory_offset)
    found: list[str] = []
    for index in range(header.entry_count):
        if cursor.remaining_bytes() < DIRECTORY_ENTRY_SIZE:
            LOGGER.debug("目录在第 %d/%d 项处被截断", index, header.entry_count)
            break
        cursor.skip(8)  # 数据偏移与大小
        name = cursor.read_fixed_ascii(LUMP_NAME_SIZE)
        if is_map_marker(name):
            found.append(name)
    return sort_map_names(found)


def parse_flat(source: ByteSource, path: Optional[Path] = None) -> ArchiveInfo:
    """解析扁平归档。

    文件过小或目录偏移非法时返回无效结果；签名无法识别时抛出
    :class:`BadSignatureError`，由调用方决定是否改用包扫描器。
    """

    path = path or IN_MEMORY_PATH
    cursor = ByteCursor(source)

    try:
        header = read_flat_header(cursor)
    except TooSmallError as exc:
        return ArchiveInfo.failure(path, str(exc), byte_size=cursor.length)

    if not _directory_offset_valid(header, cursor.length):
        LOGGER.debug("目录偏移 %d 非法（文件长度 %d）：%s", header.directory_offset, cursor.length, path)
        return ArchiveInfo.failure(
            path,
            str(BadDirectoryOffsetError()),
            archive_kind=header.kind,
            byte_size=cursor.length,
            entry_count=header.entry_count,
        )

    map_names = _collect_map_names(cursor, header)
    return ArchiveInfo(
        path=path,
        archive_kind=header.kind,
        byte_size=cursor.length,
        entry_count=header.entry_count,
        map_names=map_names,
        is_valid=True,
    )


def scan_flat_maps(source: ByteSource) -> tuple[str, ...]:
    """只扫描地图名称，用于包内嵌套的 WAD；头部不合法时抛出 ArchiveFormatError。"""

    cursor = ByteCursor(source)
    header = read_flat_header(cursor)
    if not _directory_offset_valid(header, cursor.length):
        raise BadDirectoryOffsetError()
    return _collect_map_names(cursor, header)
