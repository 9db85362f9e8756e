"""
测试清理上下文和数据模型
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from ..context import SweepContext
from ..errors import InvalidArgumentError, SweepError
from ..models import Attribute, Entry, Statistics


@pytest.mark.parametrize("days", [-1, -0.001, -365])
def test_negative_time_to_keep(days):
    """测试负数保留时间"""
    with pytest.raises(InvalidArgumentError):
        SweepContext.from_days(days)


@pytest.mark.parametrize("days", [float("nan"), float("inf"), float("-inf"), 1e12])
def test_days_out_of_range(days):
    """测试非有限或过大的天数"""
    with pytest.raises(InvalidArgumentError):
        SweepContext.from_days(days)


def test_invalid_argument_is_value_error():
    """测试异常层次"""
    assert issubclass(InvalidArgumentError, ValueError)
    assert issubclass(InvalidArgumentError, SweepError)


def test_negative_depth():
    """测试负数层级"""
    with pytest.raises(InvalidArgumentError):
        SweepContext(depth=-1)


def test_default_context_is_unconditional():
    """测试默认上下文"""
    ctx = SweepContext()

    assert ctx.unconditional
    assert ctx.is_root
    assert not SweepContext.from_days(1).unconditional


def test_descend_copies():
    """测试进入子目录时复制上下文"""
    parent = SweepContext.from_days(30)
    child = parent.descend()
    grandchild = child.descend()

    assert parent.depth == 0
    assert child.depth == 1
    assert grandchild.depth == 2
    assert child.time_to_keep == parent.time_to_keep


def test_context_is_frozen():
    """测试上下文不可变"""
    ctx = SweepContext()

    with pytest.raises(FrozenInstanceError):
        ctx.depth = 3


def test_with_time_to_keep():
    """测试替换保留时间"""
    ctx = SweepContext.from_days(30).descend()
    week = ctx.with_time_to_keep(timedelta(days=7))

    assert week.time_to_keep == timedelta(days=7)
    assert week.depth == 1
    assert ctx.time_to_keep == timedelta(days=30)


def test_written_ago_uses_minimum():
    """测试年龄取写入时间和创建时间中较近的一个"""
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    entry = Entry(
        path="/x",
        name="x",
        is_directory=False,
        last_write_time=now - timedelta(days=40),
        last_access_time=now - timedelta(days=400),
        creation_time=now - timedelta(days=5),
    )

    assert entry.written_ago(now) == timedelta(days=5)


def test_written_ago_without_creation_time():
    """测试没有创建时间时只看写入时间"""
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    entry = Entry(
        path="/x",
        name="x",
        is_directory=True,
        last_write_time=now - timedelta(days=40),
        last_access_time=now,
    )

    assert entry.written_ago(now) == timedelta(days=40)


def test_entry_flags():
    """测试属性判断"""
    now = datetime.now(timezone.utc)
    entry = Entry(
        path="/x",
        name="x",
        is_directory=False,
        last_write_time=now,
        last_access_time=now,
        attributes=Attribute.HIDDEN | Attribute.SYSTEM,
    )

    assert entry.is_protected
    assert not entry.is_link


def test_hidden_only_is_not_protected():
    """测试只有隐藏属性时不需要清除"""
    now = datetime.now(timezone.utc)
    entry = Entry("/x", "x", False, now, now, attributes=Attribute.HIDDEN)

    assert not entry.is_protected


def test_statistics():
    """测试统计累加"""
    stats = Statistics()
    stats.record(10)
    stats.record(0)
    stats.add_reclaimed(5)

    assert stats.to_dict() == {"total_items": 2, "total_logical_bytes": 15}
