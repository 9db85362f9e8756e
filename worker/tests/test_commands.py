"""
测试外部命令调用
"""

import sys

import pytest

from sweep.sink import ResultSink
from ..commands import CommandRunner, compact_docker_vhd, prune_docker
from ..executors import Executor, HostExecutor


class RecordingSink(ResultSink):
    def __init__(self):
        self.messages = []
        self.errors = []

    def message(self, text):
        self.messages.append(text)

    def error(self, text):
        self.errors.append(text)


class FakeExecutor(Executor):
    """记录命令，按命令名返回退出码"""

    def __init__(self, exit_codes=None, on_run=None):
        self.commands = []
        self.exit_codes = exit_codes or {}
        self.on_run = on_run

    def run(self, command, timeout=None):
        self.commands.append(command)
        if self.on_run:
            self.on_run(command)
        result = self.exit_codes.get(command[0], 0)
        if isinstance(result, Exception):
            raise result
        return result


def test_run_success():
    """测试命令成功"""
    sink = RecordingSink()
    executor = FakeExecutor()
    runner = CommandRunner(sink, executor)

    assert runner.run("docker", "info")
    assert executor.commands == [["docker", "info"]]
    assert sink.errors == []


def test_run_non_zero_exit():
    """测试非零退出码报告一次"""
    sink = RecordingSink()
    runner = CommandRunner(sink, FakeExecutor({"docker": 3}))

    assert not runner.run("docker", "system", "prune")
    assert sink.errors == ["Process: docker: Exit Code: 3"]


def test_run_missing_command():
    """测试命令无法启动"""
    sink = RecordingSink()
    runner = CommandRunner(sink, FakeExecutor({"wsl": FileNotFoundError(2, "No such file or directory")}))

    assert not runner.run("wsl", "--shutdown")
    assert len(sink.errors) == 1
    assert sink.errors[0].startswith("Process: wsl: ")


def test_prune_docker():
    """测试 Docker 清理命令"""
    executor = FakeExecutor()
    prune_docker(CommandRunner(RecordingSink(), executor))

    assert executor.commands == [
        ["docker", "system", "prune", "-fa", "--filter", "until=168h"],
        ["docker", "system", "prune", "-fa", "--volumes"],
    ]


def test_compact_missing_vhd(tmp_path):
    """测试虚拟磁盘不存在时不执行命令"""
    executor = FakeExecutor()

    reclaimed = compact_docker_vhd(CommandRunner(RecordingSink(), executor), str(tmp_path / "ext4.vhdx"))

    assert reclaimed == 0
    assert executor.commands == []


def test_compact_vhd_reports_reclaimed(tmp_path):
    """测试虚拟磁盘压缩回收的字节数"""
    vhd = tmp_path / "ext4.vhdx"
    vhd.write_bytes(b"x" * 1000)

    def shrink(command):
        if command[0] == "powershell":
            vhd.write_bytes(b"x" * 400)

    executor = FakeExecutor(on_run=shrink)
    reclaimed = compact_docker_vhd(CommandRunner(RecordingSink(), executor), str(vhd))

    assert reclaimed == 600
    assert [c[0] for c in executor.commands] == ["wsl", "net", "powershell"]
    assert str(vhd) in executor.commands[-1][-1]


def test_compact_vhd_quotes_path(tmp_path):
    """测试路径中的单引号在 PowerShell 命令里被转义"""
    profile = tmp_path / "O'Brien"
    profile.mkdir()
    vhd = profile / "ext4.vhdx"
    vhd.write_bytes(b"x" * 10)
    executor = FakeExecutor()

    compact_docker_vhd(CommandRunner(RecordingSink(), executor), str(vhd))

    escaped = str(vhd).replace("'", "''")
    assert executor.commands[-1][-1] == f"& {{Optimize-VHD -Path '{escaped}' -Mode Full}}"


def test_host_executor_exit_code():
    """测试主机执行器返回退出码"""
    executor = HostExecutor()

    assert executor.run([sys.executable, "-c", "import sys; sys.exit(0)"]) == 0
    assert executor.run([sys.executable, "-c", "import sys; sys.exit(7)"]) == 7


def test_host_executor_timeout():
    """测试主机执行器超时"""
    executor = HostExecutor()

    assert executor.run([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.5) == 124


def test_host_executor_missing_command():
    """测试命令不存在时抛出 OSError"""
    with pytest.raises(OSError):
        HostExecutor().run(["definitely-not-a-real-command-xyz"])
