"""执行器基类。

定义外部命令执行的统一接口。
"""

from __future__ import annotations
from abc import ABC, abstractmethod


class Executor(ABC):
    """外部命令执行器基类。"""

    @abstractmethod
    def run(self, command: list[str], timeout: int | None = None) -> int:
        """执行命令。

        Args:
            command: 命令列表，如 ["docker", "system", "prune", "-fa"]
            timeout: 超时时间（秒），None 表示不限制

        Returns:
            进程退出码（0 表示成功）

        Raises:
            OSError: 命令无法启动时
        """
        ...
