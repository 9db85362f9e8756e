"""
维护驱动程序

按顺序执行一次完整维护：Docker 清理、各盘 TEMP 与回收站、
ASP.NET 临时文件、用户配置文件目录、配置文件中的额外目录。
环境相关的路径只在这里使用，清理引擎不感知。
"""

from __future__ import annotations
import glob
import logging
import os
import shutil
import string
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Mapping, Optional

from worker.commands import CommandRunner, compact_docker_vhd, prune_docker

from .attributes import IS_WINDOWS, creation_time
from .context import SweepContext
from .engine import SweepEngine
from .sink import ResultSink

logger = logging.getLogger(__name__)

PROFILE_WEEKLY_DIRS = [
    ("AppData", "Local", "Temp"),
    ("AppData", "Local", "Microsoft", "Windows", "IECompatCache"),
    ("AppData", "Local", "Microsoft", "Windows", "IECompatUaCache"),
    ("AppData", "Local", "Microsoft", "Windows", "IEDownloadHistory"),
    ("AppData", "Local", "Microsoft", "Windows", "INetCache"),
]

PROFILE_PACKAGE_CACHES = [
    ("AppData", "Roaming", "npm-cache"),
    ("AppData", "Local", "NuGet"),
    (".nuget", "packages"),
]

DOCKER_VHD = ("AppData", "Local", "Docker", "wsl", "data", "ext4.vhdx")


def drive_roots() -> List[str]:
    """本机所有盘符根目录（非 Windows 返回空列表）"""
    if not IS_WINDOWS:
        return []
    return [f"{letter}:\\" for letter in string.ascii_uppercase if os.path.isdir(f"{letter}:\\")]


class MaintenanceDriver:
    """维护驱动程序"""

    def __init__(
        self,
        engine: SweepEngine,
        runner: CommandRunner,
        sink: ResultSink,
        config,
        environ: Optional[Mapping[str, str]] = None,
        drives: Optional[Iterable[str]] = None
    ):
        """
        初始化驱动程序

        Args:
            engine: 清理引擎
            runner: 外部命令执行器
            sink: 结果接收器
            config: 全局配置（Config）
            environ: 环境变量，默认 os.environ
            drives: 盘符根目录列表，默认自动枚举
        """
        self.engine = engine
        self.runner = runner
        self.sink = sink
        self.config = config
        self.environ = os.environ if environ is None else environ
        self.drives = list(drive_roots() if drives is None else drives)

        self.context = SweepContext.from_days(config.sweep.days)

    def run(self) -> None:
        """执行完整维护"""
        logger.info(f"开始维护: dry_run={self.engine.is_dry_run}, days={self.config.sweep.days}")
        # 压缩虚拟磁盘前先清理 Docker
        if self.config.docker.prune_enabled and not self._stop_requested():
            prune_docker(self.runner, self.config.docker.prune_until_hours)

        for step in (
            self.cleanup_temp_folders,
            self.cleanup_recycle_bins,
            self.cleanup_aspnet_temp,
            self.cleanup_profiles,
            self.cleanup_targets,
        ):
            if self._stop_requested():
                return
            step()

    def _stop_requested(self) -> bool:
        if self.engine.cancelled:
            logger.info("维护已取消")
            return True
        return False

    def cleanup_temp_folders(self) -> None:
        """各盘根目录下的 TEMP"""
        for drive in self.drives:
            if self._stop_requested():
                return
            folder = os.path.join(drive, "TEMP")
            self.sink.message(f"Cleanup {folder}...")
            try:
                self.engine.sweep(folder, self.context)
            except Exception as e:
                self.sink.error(f"{drive}: {e}")

    def cleanup_recycle_bins(self) -> None:
        """各盘回收站中每个用户的目录"""
        for drive in self.drives:
            if self._stop_requested():
                return
            folder = os.path.join(drive, "$Recycle.Bin")
            if not os.path.isdir(folder):
                continue
            self.sink.message(f"Cleanup {folder}...")
            try:
                user_bins = [e.path for e in os.scandir(folder) if e.is_dir(follow_symlinks=False)]
            except OSError as e:
                self.sink.error(f"{drive}: {e}")
                continue

            for user_bin in user_bins:
                if self._stop_requested():
                    return
                try:
                    self.engine.sweep(user_bin, self.context)
                except Exception as e:
                    self.sink.error(f"{user_bin}: {e}")

    def cleanup_aspnet_temp(self) -> None:
        """清空 Temporary ASP.NET Files 的内容，目录本身保留（ACL 不变）"""
        win_dir = self.environ.get("WinDir") or self.environ.get("WINDIR")
        if not win_dir:
            return

        for framework in ("Framework", "Framework64"):
            pattern = os.path.join(win_dir, "Microsoft.NET", framework, "v*", "Temporary ASP.NET Files")
            for folder in sorted(glob.glob(pattern)):
                if self._stop_requested():
                    return
                self.sink.message(f"Cleanup {folder}...")
                self.engine.sweep(folder, SweepContext())

    def profile_paths(self) -> List[str]:
        """需要清理的用户配置文件目录"""
        profiles = []
        win_dir = self.environ.get("WinDir") or self.environ.get("WINDIR")
        if win_dir:
            profiles.append(os.path.join(win_dir, "System32", "config", "systemprofile"))
            profiles.append(os.path.join(win_dir, "SysWOW64", "config", "systemprofile"))

        system_drive = self.environ.get("SystemDrive")
        if system_drive:
            users = os.path.join(system_drive + os.sep, "Users")
            if os.path.isdir(users):
                profiles.extend(sorted(e.path for e in os.scandir(users) if e.is_dir(follow_symlinks=False)))

        return profiles

    def cleanup_profiles(self) -> None:
        try:
            profiles = self.profile_paths()
        except OSError as e:
            self.sink.error(f"Users: {e}")
            return

        for profile in profiles:
            if self._stop_requested():
                return
            self.cleanup_user_profile(profile, self.context)

    def cleanup_user_profile(self, profile_path: str, context: SweepContext) -> None:
        """
        清理单个用户配置文件目录

        Args:
            profile_path: 用户目录
            context: 基础上下文，按目录替换保留时间
        """
        sweep_config = self.config.sweep
        week_context = context.with_time_to_keep(timedelta(days=sweep_config.profile_temp_days))
        month_context = context.with_time_to_keep(timedelta(days=sweep_config.downloads_days))

        for parts in PROFILE_WEEKLY_DIRS:
            self.engine.sweep(os.path.join(profile_path, *parts), week_context)
        self.engine.sweep(os.path.join(profile_path, "Downloads"), month_context)

        for parts in PROFILE_PACKAGE_CACHES:
            if self._stop_requested():
                return
            self.delete_folder_if_old(
                os.path.join(profile_path, *parts),
                timedelta(days=sweep_config.package_cache_days),
            )

        if self._stop_requested():
            return

        # 只有显式确认时才压缩虚拟磁盘
        vhd_path = os.path.join(profile_path, *DOCKER_VHD)
        if self.config.docker.compact_vhd and self.engine.dry_run is False and os.path.isfile(vhd_path):
            reclaimed = compact_docker_vhd(self.runner, vhd_path)
            self.engine.add_reclaimed(reclaimed)

    def delete_folder_if_old(self, path: str, max_age: timedelta) -> bool:
        """
        整个删除创建时间早于 max_age 的目录（例如 NuGet、npm 缓存）

        Returns:
            是否删除（或在 dry-run 下将会删除）
        """
        if self._stop_requested() or not os.path.isdir(path) or os.path.islink(path):
            return False

        st = os.stat(path)
        created = creation_time(st)
        if created is None:
            logger.debug(f"无法获取创建时间，使用修改时间: {path}")
            created = datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)
        if self.engine.time_source.now_utc() - created <= max_age:
            return False

        if self.engine.is_dry_run:
            self.sink.message(f"would delete: {path}")
            return True

        self.sink.message(f"deleting: {path}")
        try:
            shutil.rmtree(path)
        except OSError as e:
            self.sink.error(f"{path}: {e}")
            return False
        return True

    def cleanup_targets(self) -> None:
        """配置文件中的额外目录"""
        for target in self.config.targets:
            if self._stop_requested():
                return
            folder = os.path.expanduser(target.path)
            self.sink.message(f"Cleanup {folder}...")
            try:
                self.engine.sweep(folder, SweepContext.from_days(target.days))
            except Exception as e:
                self.sink.error(f"{folder}: {e}")
