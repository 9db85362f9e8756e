"""主机执行器。

直接在当前主机上执行命令，输出继承当前控制台。
"""

from __future__ import annotations
import logging
import subprocess
from .base import Executor

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE = 124


class HostExecutor(Executor):
    """在主机上直接执行命令的执行器。"""

    def run(self, command: list[str], timeout: int | None = None) -> int:
        """在主机上执行命令并等待结束。"""
        logger.debug(f"执行命令: {command}")
        try:
            proc = subprocess.run(command, timeout=timeout, check=False)
            return proc.returncode

        except subprocess.TimeoutExpired:
            logger.warning(f"命令超时 ({timeout}s): {command}")
            return TIMEOUT_EXIT_CODE
