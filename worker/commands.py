"""
外部命令调用

清理前后由驱动程序调用：Docker 镜像/卷清理、WSL 虚拟磁盘压缩。
清理引擎本身从不调用这里的任何函数。
"""

from __future__ import annotations
import logging
import os
from typing import Optional

from sweep.sink import ResultSink
from .executors import Executor, HostExecutor

logger = logging.getLogger(__name__)


class CommandRunner:
    """执行外部命令，失败时通过结果接收器报告一次"""

    def __init__(
        self,
        sink: ResultSink,
        executor: Optional[Executor] = None,
        timeout: Optional[int] = None
    ):
        """
        初始化命令执行器

        Args:
            sink: 结果接收器
            executor: 实际执行命令的执行器，默认在主机上执行
            timeout: 单条命令超时时间（秒）
        """
        self.sink = sink
        self.executor = executor or HostExecutor()
        self.timeout = timeout

    def run(self, cmd: str, *args: str) -> bool:
        """
        执行命令

        Returns:
            退出码为 0 时返回 True
        """
        command = [cmd, *args]
        logger.info(f"执行: {' '.join(command)}")
        try:
            exit_code = self.executor.run(command, timeout=self.timeout)
        except OSError as e:
            self.sink.error(f"Process: {cmd}: {e}")
            return False

        if exit_code != 0:
            self.sink.error(f"Process: {cmd}: Exit Code: {exit_code}")
            return False
        return True


def prune_docker(runner: CommandRunner, until_hours: int = 168) -> None:
    """清理一周前的 Docker 镜像和容器，再清理未使用的卷"""
    runner.run("docker", "system", "prune", "-fa", "--filter", f"until={until_hours}h")
    runner.run("docker", "system", "prune", "-fa", "--volumes")


def compact_docker_vhd(runner: CommandRunner, vhd_path: str) -> int:
    """
    压缩 Docker Desktop 的 WSL 虚拟磁盘

    Args:
        runner: 命令执行器
        vhd_path: ext4.vhdx 路径

    Returns:
        回收的字节数，文件不存在时为 0
    """
    if not os.path.isfile(vhd_path):
        return 0

    original_size = os.path.getsize(vhd_path)
    # PowerShell 单引号字符串中的单引号要写两次
    quoted_path = vhd_path.replace("'", "''")
    runner.run("wsl", "--shutdown")
    runner.run("net", "start", "vmms")
    runner.run(
        "powershell",
        "-NonInteractive",
        "-Command",
        f"& {{Optimize-VHD -Path '{quoted_path}' -Mode Full}}",
    )
    new_size = os.path.getsize(vhd_path)

    reclaimed = original_size - new_size
    logger.info(f"虚拟磁盘压缩完成: {vhd_path}, 回收 {reclaimed} 字节")
    return reclaimed
