"""平台文件属性的可移植封装。

Windows 上读取 st_file_attributes 并通过 SetFileAttributesW 清除保护属性；
其他平台用权限位近似只读，点号开头近似隐藏，没有“系统”属性。
"""

from __future__ import annotations
import os
import stat
from datetime import datetime, timezone
from typing import Optional

from .models import Attribute, Entry

IS_WINDOWS = os.name == "nt"


def _utc(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def read_attributes(name: str, st: os.stat_result) -> Attribute:
    """把 stat 结果映射为可移植属性集合"""
    attrs = Attribute.NONE
    file_attrs = getattr(st, "st_file_attributes", None)

    if file_attrs is not None:
        if file_attrs & stat.FILE_ATTRIBUTE_READONLY:
            attrs |= Attribute.READ_ONLY
        if file_attrs & stat.FILE_ATTRIBUTE_HIDDEN:
            attrs |= Attribute.HIDDEN
        if file_attrs & stat.FILE_ATTRIBUTE_SYSTEM:
            attrs |= Attribute.SYSTEM
        if file_attrs & stat.FILE_ATTRIBUTE_REPARSE_POINT:
            attrs |= Attribute.REPARSE_POINT
    else:
        if not st.st_mode & stat.S_IWUSR:
            attrs |= Attribute.READ_ONLY
        if name.startswith("."):
            attrs |= Attribute.HIDDEN

    if stat.S_ISLNK(st.st_mode):
        attrs |= Attribute.REPARSE_POINT

    return attrs


def creation_time(st: os.stat_result) -> Optional[datetime]:
    """文件创建时间；平台不提供时返回 None。

    Linux 的 st_ctime 是 inode 变更时间，不能当作创建时间。
    """
    birth = getattr(st, "st_birthtime", None)
    if birth is not None:
        return _utc(birth)
    if IS_WINDOWS:
        return _utc(st.st_ctime)
    return None


def entry_from_dir_entry(dir_entry: os.DirEntry) -> Entry:
    """从 scandir 的条目读取快照（不跟随链接）"""
    st = dir_entry.stat(follow_symlinks=False)
    attrs = read_attributes(dir_entry.name, st)
    is_link = bool(attrs & Attribute.REPARSE_POINT)
    is_directory = not is_link and stat.S_ISDIR(st.st_mode)
    is_file = not is_link and stat.S_ISREG(st.st_mode)

    return Entry(
        path=dir_entry.path,
        name=dir_entry.name,
        is_directory=is_directory,
        last_write_time=_utc(st.st_mtime),
        last_access_time=_utc(st.st_atime),
        creation_time=creation_time(st),
        attributes=attrs,
        logical_size=st.st_size if is_file else 0,
    )


def clear_protective_attributes(entry: Entry) -> None:
    """把条目属性恢复为普通状态，不支持的平台上什么也不做"""
    if IS_WINDOWS:
        import ctypes

        if not ctypes.windll.kernel32.SetFileAttributesW(entry.path, stat.FILE_ATTRIBUTE_NORMAL):
            raise ctypes.WinError()
        return

    # chmod 会跟随链接
    if entry.is_link or not hasattr(os, "chmod"):
        return
    mode = os.lstat(entry.path).st_mode
    os.chmod(entry.path, stat.S_IMODE(mode) | stat.S_IWUSR)


def remove_entry(entry: Entry) -> None:
    """删除单个条目；目录必须已经为空"""
    if entry.is_directory:
        os.rmdir(entry.path)
    elif entry.is_link and IS_WINDOWS and os.path.isdir(entry.path):
        # 目录联接和目录符号链接只能用 rmdir 删除
        os.rmdir(entry.path)
    else:
        os.unlink(entry.path)
