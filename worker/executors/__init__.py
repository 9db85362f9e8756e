from .base import Executor
from .host import HostExecutor

__all__ = ["Executor", "HostExecutor"]
