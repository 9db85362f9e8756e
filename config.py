"""
配置管理模块

支持从YAML配置文件和环境变量读取配置
"""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field, asdict


@dataclass
class SweepConfig:
    """清理配置"""
    days: float = 30
    marker_name: str = "desktop.ini"
    profile_temp_days: float = 7
    downloads_days: float = 30
    package_cache_days: float = 30


@dataclass
class DockerConfig:
    """Docker 与虚拟磁盘配置"""
    prune_enabled: bool = True
    prune_until_hours: int = 168
    compact_vhd: bool = True
    timeout: Optional[int] = 3600


@dataclass
class TargetConfig:
    """额外的清理目录"""
    path: str
    days: float = 30


@dataclass
class OutputConfig:
    """输出配置"""
    format: str = "table"  # table, json, yaml
    color: bool = True
    verbose: bool = False
    quiet: bool = False


@dataclass
class Config:
    """全局配置"""
    sweep: SweepConfig = field(default_factory=SweepConfig)
    docker: DockerConfig = field(default_factory=DockerConfig)
    targets: List[TargetConfig] = field(default_factory=list)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def get_config_path(cls) -> Path:
        """获取配置文件路径"""
        # 优先级：
        # 1. 环境变量 CLEANUP_AGENT_CONFIG
        # 2. ~/.cleanup-agent/config.yaml
        # 3. ./config.yaml

        env_path = os.getenv("CLEANUP_AGENT_CONFIG")
        if env_path:
            return Path(env_path)

        home_config = Path.home() / ".cleanup-agent" / "config.yaml"
        if home_config.exists():
            return home_config

        local_config = Path("config.yaml")
        if local_config.exists():
            return local_config

        return home_config

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """
        加载配置

        Args:
            config_path: 配置文件路径，如果为None则自动查找

        Returns:
            Config对象
        """
        if config_path is None:
            config_path = cls.get_config_path()

        config = cls()

        if config_path.exists():
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}

            if 'sweep' in data:
                config.sweep = SweepConfig(**data['sweep'])
            if 'docker' in data:
                config.docker = DockerConfig(**data['docker'])
            if 'targets' in data:
                config.targets = [TargetConfig(**t) for t in data['targets'] or []]
            if 'output' in data:
                config.output = OutputConfig(**data['output'])

        # 环境变量覆盖
        config._load_from_env()

        return config

    def _load_from_env(self):
        """从环境变量加载配置"""
        if os.getenv("CLEANUP_DAYS"):
            self.sweep.days = float(os.getenv("CLEANUP_DAYS"))
        if os.getenv("CLEANUP_MARKER"):
            self.sweep.marker_name = os.getenv("CLEANUP_MARKER")
        if os.getenv("CLEANUP_DOCKER_PRUNE"):
            self.docker.prune_enabled = os.getenv("CLEANUP_DOCKER_PRUNE").lower() in ("1", "true", "yes", "y")

    def save(self, config_path: Optional[Path] = None):
        """
        保存配置到文件

        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
        """
        if config_path is None:
            config_path = self.get_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, allow_unicode=True)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            'sweep': asdict(self.sweep),
            'docker': asdict(self.docker),
            'targets': [asdict(t) for t in self.targets],
            'output': asdict(self.output)
        }
