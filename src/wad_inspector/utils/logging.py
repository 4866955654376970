"""日志初始化。"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PLAIN_FORMAT = "%(asctime)s [%(processName)s] %(levelname)s %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO, *, use_rich: bool = True) -> None:
    """初始化项目日志配置。

    终端下默认交给 rich 渲染，输出到文件或管道时可关闭以保留纯文本格式。
    """

    if use_rich:
        logging.basicConfig(
            level=level,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )
    else:
        logging.basicConfig(level=level, format=PLAIN_FORMAT)


def level_for(verbose: bool) -> int:
    return logging.DEBUG if verbose else logging.INFO
