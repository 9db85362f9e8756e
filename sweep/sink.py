"""清理结果输出。

引擎只通过 message / error 两个方法上报进度和错误，
不关心输出到哪里。
"""

from __future__ import annotations
import logging
import sys
from abc import ABC, abstractmethod

from rich.console import Console

logger = logging.getLogger(__name__)


class ResultSink(ABC):
    """结果接收器基类。"""

    @abstractmethod
    def message(self, text: str) -> None:
        """普通进度消息。"""
        ...

    @abstractmethod
    def error(self, text: str) -> None:
        """错误消息。"""
        ...


class ConsoleResultSink(ResultSink):
    """控制台输出：消息白色输出到 stdout，错误红色输出到 stderr。

    记录是否出现过错误，命令行据此决定退出码。
    """

    def __init__(self, color: bool = True, quiet: bool = False):
        """
        初始化控制台输出

        Args:
            color: 是否使用颜色
            quiet: 为 True 时不打印普通消息（错误仍然打印）
        """
        color_system = "auto" if color else None
        self.out = Console(color_system=color_system, highlight=False)
        self.err = Console(file=sys.stderr, color_system=color_system, highlight=False)
        self.quiet = quiet
        self.error_count = 0

    @property
    def at_least_one_error(self) -> bool:
        return self.error_count > 0

    def message(self, text: str) -> None:
        logger.info(text)
        if not self.quiet:
            self.out.print(text, style="white", markup=False, soft_wrap=True)

    def error(self, text: str) -> None:
        self.error_count += 1
        logger.error(text)
        self.err.print(f"Error: {text}", style="red", markup=False, soft_wrap=True)


class LoggingResultSink(ResultSink):
    """只写日志的输出（无控制台）。"""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger
        self.error_count = 0

    @property
    def at_least_one_error(self) -> bool:
        return self.error_count > 0

    def message(self, text: str) -> None:
        self.log.info(text)

    def error(self, text: str) -> None:
        self.error_count += 1
        self.log.error(text)
