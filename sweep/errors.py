"""清理引擎异常定义。"""

from __future__ import annotations


class SweepError(Exception):
    """清理相关错误的基类。"""


class InvalidArgumentError(SweepError, ValueError):
    """参数非法（例如保留时间为负数）。

    在遍历开始之前同步抛出。
    """
