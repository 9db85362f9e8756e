"""
输出格式化器

支持多种输出格式：Table, JSON, YAML
"""

import json
import yaml
from io import StringIO
from typing import Dict, Any, Optional
from rich.console import Console
from rich.table import Table
from rich import box

FORMATS = ("table", "json", "yaml")


class OutputFormatter:
    """输出格式化器"""

    def __init__(self, format: str = "table", color: bool = True):
        """
        初始化格式化器

        Args:
            format: 输出格式 (table, json, yaml)
            color: 是否使用颜色
        """
        self.format = format.lower()
        self.color = color

    def _render(self, renderable) -> str:
        string_io = StringIO()
        temp_console = Console(file=string_io, color_system="auto" if self.color else None)
        temp_console.print(renderable)
        return string_io.getvalue()

    def format_dict(self, data: Dict[str, Any], title: Optional[str] = None) -> str:
        """
        格式化字典数据

        Args:
            data: 字典数据
            title: 标题

        Returns:
            格式化后的字符串
        """
        if self.format == "json":
            return json.dumps(data, indent=2, ensure_ascii=False)

        elif self.format == "yaml":
            return yaml.dump(data, default_flow_style=False, allow_unicode=True)

        else:  # table
            table = Table(title=title, box=box.ROUNDED, show_header=False)
            table.add_column("Key", style="cyan")
            table.add_column("Value", style="white")

            for key, value in data.items():
                table.add_row(str(key), str(value))

            return self._render(table)


class SummaryFormatter:
    """清理结果格式化器"""

    @staticmethod
    def format_summary(
        statistics,
        error_count: int,
        dry_run: bool,
        formatter: OutputFormatter
    ) -> str:
        """
        格式化清理统计

        Args:
            statistics: Statistics 对象
            error_count: 报告的错误数
            dry_run: 是否为预览模式
            formatter: 输出格式化器

        Returns:
            格式化后的字符串
        """
        if formatter.format in ("json", "yaml"):
            data = statistics.to_dict()
            data["errors"] = error_count
            data["dry_run"] = dry_run
            return formatter.format_dict(data)

        lines = [
            f"Total reclaimed: {statistics.total_logical_bytes:,} bytes (logical)",
            f"Total deleted: {statistics.total_items} items",
        ]
        if dry_run:
            lines.append("DryRun: 未删除任何内容，使用 --confirm 执行删除")
        if error_count:
            lines.append(f"Errors: {error_count}")
        return "\n".join(lines)
