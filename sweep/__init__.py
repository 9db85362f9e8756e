"""
清理引擎

按保留时间清理目录树中过期的文件和目录
"""

from .clock import TimeSource, SystemTimeSource, FixedTimeSource
from .context import SweepContext
from .engine import SweepEngine, DEFAULT_MARKER_NAME
from .errors import SweepError, InvalidArgumentError
from .models import Attribute, Entry, Statistics
from .sink import ResultSink, ConsoleResultSink, LoggingResultSink

__all__ = [
    "SweepEngine",
    "SweepContext",
    "Statistics",
    "Entry",
    "Attribute",
    "TimeSource",
    "SystemTimeSource",
    "FixedTimeSource",
    "ResultSink",
    "ConsoleResultSink",
    "LoggingResultSink",
    "SweepError",
    "InvalidArgumentError",
    "DEFAULT_MARKER_NAME",
]
