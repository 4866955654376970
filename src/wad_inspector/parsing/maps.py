"""地图标记识别与排序。

DOOM 系引擎有两种地图命名方式：

* 分章节式 ``ExMy``（DOOM 1 / Heretic），例如 ``E1M1``；
* 顺序式 ``MAPxx``（DOOM 2 及之后），例如 ``MAP01``，允许在两位数字后追加字符。
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, Optional

_EPISODE_RE = re.compile(r"E([0-9])M([0-9])")
_SEQUENTIAL_RE = re.compile(r"MAP[0-9]{2}")
_LEADING_DIGITS_RE = re.compile(r"MAP([0-9]+)")

SEQUENTIAL_PREFIX = "MAP"


class MapNamingStyle(str, Enum):
    EPISODE = "episode"
    SEQUENTIAL = "sequential"


def normalize_map_name(name: str) -> str:
    return name.strip().upper()


def map_naming_style(name: str) -> Optional[MapNamingStyle]:
    """返回名称所属的命名方式；两种模式互斥，不匹配时返回 None。"""

    upper = name.upper()
    if _EPISODE_RE.fullmatch(upper):
        return MapNamingStyle.EPISODE
    if _SEQUENTIAL_RE.match(upper):
        return MapNamingStyle.SEQUENTIAL
    return None


def is_map_marker(name: str) -> bool:
    return map_naming_style(name) is not None


def _sequential_number(name: str) -> Optional[int]:
    if not name.startswith(SEQUENTIAL_PREFIX):
        return None
    suffix = name[len(SEQUENTIAL_PREFIX):]
    if suffix and suffix.isascii() and suffix.isdigit():
        return int(suffix)
    return None


def map_sort_key(name: str) -> tuple:
    """规范排序键。

    MAP 后紧跟数字的名称按该数字排序（MAP01 < MAP01A < MAP02 < MAP10），
    后缀字符只在数字相同时参与比较；其余名称按字节序，ExMy 的字节序即
    先比较章节号再比较整串。此类 MAP 名称整体归入 "MAP" 这一位置，
    保证与其他字符串混排时仍是全序。
    """

    digits = _LEADING_DIGITS_RE.match(name)
    if digits:
        return (SEQUENTIAL_PREFIX, int(digits.group(1)), name)
    return (name, -1, "")


def compare_map_names(left: str, right: str) -> int:
    left_key = map_sort_key(left)
    right_key = map_sort_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def sort_map_names(names: Iterable[str]) -> tuple[str, ...]:
    """去重并按规范顺序排序。"""

    return tuple(sorted(set(names), key=map_sort_key))


def warp_arguments(name: str) -> list[str]:
    """生成引擎命令行的 ``-warp`` 参数。

    ``E2M3`` -> ``["-warp", "2", "3"]``，``MAP07`` -> ``["-warp", "7"]``。
    """

    upper = normalize_map_name(name)
    episode = _EPISODE_RE.fullmatch(upper)
    if episode:
        return ["-warp", episode.group(1), episode.group(2)]
    number = _sequential_number(upper)
    if number is not None and len(upper) >= 5:
        return ["-warp", str(number)]
    return []
