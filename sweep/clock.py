"""时间源。

引擎每访问一个目录就取一次当前时间，测试时可注入固定时钟。
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class TimeSource(ABC):
    """当前时间提供者基类。"""

    @abstractmethod
    def now_utc(self) -> datetime:
        """返回当前 UTC 时间（带时区）。"""
        ...


class SystemTimeSource(TimeSource):
    """系统时钟。"""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedTimeSource(TimeSource):
    """可手动设置的时钟。"""

    def __init__(self, instant: datetime | None = None):
        self.instant = instant or datetime.now(timezone.utc)

    def now_utc(self) -> datetime:
        return self.instant

    def advance(self, delta: timedelta) -> None:
        self.instant = self.instant + delta
