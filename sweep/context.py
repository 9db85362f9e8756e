"""清理上下文。

每次递归调用都拿到自己的一份副本，子目录里的层级变化对兄弟目录
和父目录不可见。
"""

from __future__ import annotations
import math
from dataclasses import dataclass, replace
from datetime import timedelta

from .errors import InvalidArgumentError


@dataclass(frozen=True)
class SweepContext:
    """清理上下文

    Attributes:
        time_to_keep: 保留时间，零表示无条件删除
        depth: 当前嵌套层级，清理根目录为 0
    """
    time_to_keep: timedelta = timedelta(0)
    depth: int = 0

    def __post_init__(self):
        if self.time_to_keep < timedelta(0):
            raise InvalidArgumentError(f"time_to_keep must not be negative: {self.time_to_keep}")
        if self.depth < 0:
            raise InvalidArgumentError(f"depth must not be negative: {self.depth}")

    @classmethod
    def from_days(cls, days: float) -> "SweepContext":
        if not math.isfinite(days):
            raise InvalidArgumentError(f"days must be a finite number: {days}")
        try:
            time_to_keep = timedelta(days=days)
        except OverflowError as e:
            raise InvalidArgumentError(f"days out of range: {days}") from e
        return cls(time_to_keep=time_to_keep)

    @property
    def unconditional(self) -> bool:
        return self.time_to_keep == timedelta(0)

    @property
    def is_root(self) -> bool:
        return self.depth == 0

    def descend(self) -> "SweepContext":
        """返回进入下一层目录时使用的副本。"""
        return replace(self, depth=self.depth + 1)

    def with_time_to_keep(self, time_to_keep: timedelta) -> "SweepContext":
        return replace(self, time_to_keep=time_to_keep)
