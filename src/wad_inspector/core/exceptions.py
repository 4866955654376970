"""项目内使用的自定义异常定义。"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """解析失败的分类，值即对外展示的错误文本。"""

    NOT_FOUND = "file not found"
    TOO_SMALL = "file too small"
    BAD_SIGNATURE = "unrecognized flat-archive signature"
    BAD_DIRECTORY_OFFSET = "invalid directory offset"
    BAD_PACKAGE = "invalid package archive"
    GENERIC = "parse error"


class WadInspectorError(Exception):
    """基础异常类型。"""


class InvalidConfigurationError(WadInspectorError):
    """配置不合法时抛出。"""


class OutOfBoundsError(WadInspectorError):
    """读取位置越过数据末尾。"""

    def __init__(self, offset: int, wanted: int, length: int) -> None:
        super().__init__(f"read of {wanted} bytes at offset {offset} exceeds length {length}")
        self.offset = offset
        self.wanted = wanted
        self.length = length


class ArchiveFormatError(WadInspectorError):
    """归档结构不合法。"""

    kind: ErrorKind = ErrorKind.GENERIC

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.kind.value)


class TooSmallError(ArchiveFormatError):
    """文件不足 12 字节，无法容纳扁平归档头。"""

    kind = ErrorKind.TOO_SMALL


class BadSignatureError(ArchiveFormatError):
    """签名既不是 IWAD 也不是 PWAD，调用方应改用包扫描器重试。"""

    kind = ErrorKind.BAD_SIGNATURE

    def __init__(self, signature: str) -> None:
        super().__init__(f"{self.kind.value}: {signature!r}")
        self.signature = signature


class BadDirectoryOffsetError(ArchiveFormatError):
    """目录偏移不在 [12, length) 范围内。"""

    kind = ErrorKind.BAD_DIRECTORY_OFFSET


class BadPackageError(ArchiveFormatError):
    """ZIP 容器无法打开或结构损坏。"""

    kind = ErrorKind.BAD_PACKAGE
