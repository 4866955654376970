"""展示用的格式化工具函数。"""

from __future__ import annotations

KIB = 1024
MIB = 1024 * 1024


def format_byte_size(size: int) -> str:
    """将字节数格式化为 B / KB / MB。"""

    if size < KIB:
        return f"{size} B"
    if size < MIB:
        return f"{size / KIB:.1f} KB"
    return f"{size / MIB:.1f} MB"
