"""
测试公共夹具
"""

import os
from datetime import datetime, timedelta, timezone

import pytest

from ..clock import FixedTimeSource
from ..engine import SweepEngine
from ..sink import ResultSink

# 测试时钟比真实时间晚 40 天：刚创建的文件都是“40 天前”的
CLOCK_OFFSET = timedelta(days=40)


class RecordingSink(ResultSink):
    """记录所有消息"""

    def __init__(self):
        self.messages = []
        self.errors = []

    def message(self, text):
        self.messages.append(text)

    def error(self, text):
        self.errors.append(text)


def set_times(path, instant, access=None):
    """设置最后写入（和访问）时间，不跟随链接"""
    access = access or instant
    os.utime(path, (access.timestamp(), instant.timestamp()))


def snapshot(root):
    """目录树的路径、大小、权限、修改时间"""
    result = {}
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            path = os.path.join(dirpath, name)
            st = os.lstat(path)
            result[os.path.relpath(path, root)] = (st.st_size, st.st_mode, st.st_mtime_ns)
    return result


def count_entries(root):
    return len(snapshot(root))


@pytest.fixture
def clock():
    return FixedTimeSource(datetime.now(timezone.utc) + CLOCK_OFFSET)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def engine(clock, sink):
    sut = SweepEngine(clock, sink)
    sut.dry_run = False
    return sut


@pytest.fixture
def data_dir(tmp_path):
    """
    Data/
      desktop.ini
      A/temp1.txt  A/desktop.ini  A/temp1_ro.txt  A/.temp1_hid.txt
      B/temp2.txt  C/temp2.txt  D/temp2.txt
    """
    root = tmp_path / "Data"
    (root / "A").mkdir(parents=True)
    (root / "desktop.ini").write_text("1")
    (root / "A" / "temp1.txt").write_text("1")
    (root / "A" / "desktop.ini").write_text("1")
    (root / "A" / "temp1_ro.txt").write_text("1")
    os.chmod(root / "A" / "temp1_ro.txt", 0o444)
    (root / "A" / ".temp1_hid.txt").write_text("1")

    for name in ("B", "C", "D"):
        (root / name).mkdir()
        (root / name / "temp2.txt").write_text("22")

    return root


DATA_TOTAL = 12
