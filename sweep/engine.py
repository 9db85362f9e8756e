"""
清理引擎

后序深度优先遍历目录树，按保留时间判断并删除过期的文件和目录。
每个条目的删除失败只影响它自己，每个目录的异常只影响该目录。
"""

from __future__ import annotations
import logging
import os
import threading
from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Union

from .attributes import clear_protective_attributes, entry_from_dir_entry, remove_entry
from .clock import TimeSource
from .context import SweepContext
from .errors import InvalidArgumentError
from .models import Entry, Statistics
from .sink import ResultSink

logger = logging.getLogger(__name__)

DEFAULT_MARKER_NAME = "desktop.ini"


class SweepEngine:
    """清理引擎

    dry_run 是三态开关：None 与 True 一样只预览不删除，
    只有显式设置为 False 才会真正删除。
    """

    def __init__(
        self,
        time_source: TimeSource,
        result_sink: ResultSink,
        marker_name: str = DEFAULT_MARKER_NAME
    ):
        """
        初始化清理引擎

        Args:
            time_source: 时间源
            result_sink: 结果接收器
            marker_name: 清理根目录下需要保留的标记文件名（不区分大小写）
        """
        if time_source is None:
            raise InvalidArgumentError("time_source is required")
        if result_sink is None:
            raise InvalidArgumentError("result_sink is required")

        self._time_source = time_source
        self._sink = result_sink
        self.marker_name = marker_name
        self.dry_run: Optional[bool] = None

        self._statistics = Statistics()
        self._cancel_event = threading.Event()

    @property
    def time_source(self) -> TimeSource:
        return self._time_source

    @property
    def is_dry_run(self) -> bool:
        return True if self.dry_run is None else self.dry_run

    @property
    def statistics(self) -> Statistics:
        """累计统计的只读快照"""
        return replace(self._statistics)

    def reset_statistics(self) -> None:
        self._statistics = Statistics()

    def add_reclaimed(self, logical_bytes: int) -> None:
        """计入引擎之外回收的空间（例如虚拟磁盘压缩）"""
        self._statistics.add_reclaimed(logical_bytes)

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        """请求停止清理，在两个条目之间生效。"""
        self._cancel_event.set()

    def sweep(
        self,
        root: Union[str, os.PathLike],
        context: Optional[SweepContext] = None
    ) -> None:
        """
        清理目录下的过期内容，根目录本身保留

        Args:
            root: 清理根目录，不存在时直接返回
            context: 清理上下文，默认无条件删除
        """
        if context is None:
            context = SweepContext()

        folder = os.fspath(root)
        if not os.path.isdir(folder):
            logger.debug(f"清理目录不存在，跳过: {folder}")
            return

        self._sweep_folder(folder, context)

    def _sweep_folder(self, folder: str, context: SweepContext) -> None:
        now = self._time_source.now_utc()

        try:
            entries = self._list_entries(folder)

            for entry in entries:
                if not entry.is_directory:
                    continue
                if self._stop_requested(folder):
                    return
                if not self._unlock_directory(entry):
                    continue
                self._sweep_folder(entry.path, context.descend())
                if self._stop_requested(folder):
                    return
                self._judge_and_delete(entry, context, now)

            for entry in entries:
                if entry.is_directory:
                    continue
                if self._stop_requested(folder):
                    return
                if context.is_root and entry.name.casefold() == self.marker_name.casefold():
                    continue
                self._judge_and_delete(entry, context, now)

        except Exception as e:
            self._sink.error(f"{folder}: {e}")

    @staticmethod
    def _list_entries(folder: str) -> List[Entry]:
        # 句柄在递归和删除之前关闭
        with os.scandir(folder) as it:
            entries = [entry_from_dir_entry(dir_entry) for dir_entry in it]
        entries.sort(key=lambda e: e.name)
        return entries

    def _stop_requested(self, folder: str) -> bool:
        if self._cancel_event.is_set():
            logger.info(f"清理已取消: {folder}")
            return True
        return False

    def _unlock_directory(self, entry: Entry) -> bool:
        """删除子条目前先让只读目录可写；失败时跳过该目录"""
        if self.is_dry_run or not entry.is_protected:
            return True
        try:
            clear_protective_attributes(entry)
        except OSError as e:
            self._sink.error(f"{entry.path}: {e}")
            return False
        return True

    def is_eligible(self, entry: Entry, context: SweepContext, now: datetime) -> bool:
        """判断条目是否过期"""
        if context.unconditional:
            return True
        return entry.written_ago(now) > context.time_to_keep

    def _judge_and_delete(self, entry: Entry, context: SweepContext, now: datetime) -> None:
        if not self.is_eligible(entry, context, now):
            return

        try:
            if self.is_dry_run:
                self._sink.message(f"would delete: {entry.path}")
            else:
                self._sink.message(f"deleting: {entry.path}")
                if entry.is_protected:
                    clear_protective_attributes(entry)
                remove_entry(entry)

            self._statistics.record(entry.logical_size)

        except OSError as e:
            self._sink.error(f"{entry.path}: {e}")
