"""顺序字节读取器，供扁平归档目录解析使用。"""

from __future__ import annotations

import io
import os
import struct
from typing import BinaryIO, Union

from wad_inspector.core.exceptions import OutOfBoundsError

ByteSource = Union[bytes, bytearray, memoryview, BinaryIO]

_U32_LE = struct.Struct("<I")


class ByteCursor:
    """在可 seek 的二进制流上按顺序读取定长字段。

    每次读取都会推进游标；越界的读取、跳过或定位一律抛出
    :class:`OutOfBoundsError`，不会返回部分数据。
    """

    def __init__(self, source: ByteSource) -> None:
        if isinstance(source, (bytes, bytearray, memoryview)):
            stream: BinaryIO = io.BytesIO(bytes(source))
        else:
            stream = source
        self._stream = stream
        self._start = stream.tell()
        self._length = stream.seek(0, os.SEEK_END) - self._start
        stream.seek(self._start)
        self._position = 0

    @property
    def length(self) -> int:
        return self._length

    @property
    def position(self) -> int:
        return self._position

    def remaining_bytes(self) -> int:
        return self._length - self._position

    def seek(self, offset: int) -> None:
        if offset < 0 or offset > self._length:
            raise OutOfBoundsError(offset, 0, self._length)
        self._stream.seek(self._start + offset)
        self._position = offset

    def skip(self, count: int) -> None:
        self._require(count)
        self.seek(self._position + count)

    def read_bytes(self, count: int) -> bytes:
        self._require(count)
        data = self._stream.read(count)
        if len(data) != count:
            # 流在读取期间被截断
            raise OutOfBoundsError(self._position, count, self._position + len(data))
        self._position += count
        return data

    def read_u32_le(self) -> int:
        return _U32_LE.unpack(self.read_bytes(_U32_LE.size))[0]

    def read_fixed_ascii(self, count: int) -> str:
        """读取定长 ASCII 名称，截去 NUL 填充并转为大写。"""

        raw = self.read_bytes(count).split(b"\x00", 1)[0]
        return raw.decode("ascii", errors="replace").upper()

    def _require(self, count: int) -> None:
        if count < 0 or count > self.remaining_bytes():
            raise OutOfBoundsError(self._position, count, self._length)
