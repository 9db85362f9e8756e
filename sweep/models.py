"""清理数据模型。"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Flag, auto
from typing import Any, Dict, Optional


class Attribute(Flag):
    """可移植的文件属性集合"""
    NONE = 0
    READ_ONLY = auto()
    HIDDEN = auto()
    SYSTEM = auto()
    REPARSE_POINT = auto()


PROTECTIVE = Attribute.READ_ONLY | Attribute.SYSTEM


@dataclass(frozen=True)
class Entry:
    """文件或目录的快照，列目录时读取，不跨调用缓存"""
    path: str
    name: str
    is_directory: bool
    last_write_time: datetime
    last_access_time: datetime
    creation_time: Optional[datetime] = None
    attributes: Attribute = Attribute.NONE
    logical_size: int = 0

    @property
    def is_link(self) -> bool:
        return bool(self.attributes & Attribute.REPARSE_POINT)

    @property
    def is_protected(self) -> bool:
        return bool(self.attributes & PROTECTIVE)

    def written_ago(self, now: datetime):
        """距最后写入/创建的时间，取两者中较小的一个。

        访问时间不参与计算。
        """
        age = now - self.last_write_time
        if self.creation_time is not None:
            created = now - self.creation_time
            if created < age:
                age = created
        return age


@dataclass
class Statistics:
    """一次清理（或同一引擎的多次清理）的累计统计"""
    total_items: int = 0
    total_logical_bytes: int = 0

    def record(self, logical_size: int) -> None:
        self.total_items += 1
        self.total_logical_bytes += logical_size

    def add_reclaimed(self, logical_bytes: int) -> None:
        self.total_logical_bytes += logical_bytes

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
