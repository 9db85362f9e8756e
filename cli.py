"""
Cleanup Agent CLI 工具

清理过期的临时文件、缓存和回收站内容
"""

import click
import logging
import signal
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Optional
from rich.console import Console

from config import Config
from formatters import FORMATS, OutputFormatter, SummaryFormatter
from sweep import ConsoleResultSink, SweepContext, SweepEngine, SystemTimeSource, InvalidArgumentError
from sweep.driver import MaintenanceDriver
from worker.commands import CommandRunner

console = Console(stderr=True)


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def resolve_dry_run(confirm: bool, dryrun: bool) -> Optional[bool]:
    """
    解析 --confirm / --dryrun

    两者同时指定时给出警告并按 dry-run 执行；都不指定时保持未设置（等同 dry-run）。
    """
    if confirm and dryrun:
        console.print("[yellow]⚠️  --dryrun 不能与 --confirm 同时使用，按 dry-run 执行[/yellow]")
        return True
    if confirm:
        return False
    if dryrun:
        return True
    return None


@contextmanager
def cancel_on_interrupt(engine: SweepEngine):
    """Ctrl+C 时请求引擎在下一个条目前停止"""
    def handler(signum, frame):
        console.print("\n[yellow]正在停止清理...[/yellow]")
        engine.cancel()

    previous = signal.signal(signal.SIGINT, handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def build_engine(config: Config, dry_run: Optional[bool]):
    sink = ConsoleResultSink(color=config.output.color, quiet=config.output.quiet)
    engine = SweepEngine(SystemTimeSource(), sink, marker_name=config.sweep.marker_name)
    engine.dry_run = dry_run
    return engine, sink


def print_summary(config: Config, engine: SweepEngine, sink: ConsoleResultSink):
    formatter = OutputFormatter(config.output.format, color=config.output.color)
    click.echo(SummaryFormatter.format_summary(
        engine.statistics,
        sink.error_count,
        engine.is_dry_run,
        formatter,
    ))


def load_config(config_path: Optional[str], output_format: Optional[str]) -> Config:
    config = Config.load(Path(config_path) if config_path else None)
    if output_format:
        config.output.format = output_format
    setup_logging(config.output.verbose)
    return config


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """Cleanup Agent - 清理过期的临时文件和缓存"""
    pass


def dry_run_options(func):
    func = click.option("--dryrun", "--dry-run", "dryrun", is_flag=True, help="只预览，不删除（默认）")(func)
    func = click.option("--confirm", is_flag=True, help="确认删除")(func)
    func = click.option("--config", "config_path", type=click.Path(dir_okay=False), help="配置文件路径")(func)
    func = click.option("--format", "output_format", type=click.Choice(FORMATS), help="统计输出格式")(func)
    return func


# ==================== 清理 ====================

@cli.command("run")
@dry_run_options
def run(confirm, dryrun, config_path, output_format):
    """执行完整维护（Docker、TEMP、回收站、用户目录）"""
    config = load_config(config_path, output_format)
    engine, sink = build_engine(config, resolve_dry_run(confirm, dryrun))
    runner = CommandRunner(sink, timeout=config.docker.timeout)
    try:
        driver = MaintenanceDriver(engine, runner, sink, config)
    except InvalidArgumentError as e:
        console.print(f"[red]参数错误: {e}[/red]")
        sys.exit(2)

    with cancel_on_interrupt(engine):
        driver.run()

    print_summary(config, engine, sink)
    sys.exit(1 if sink.at_least_one_error else 0)


@cli.command("sweep")
@click.argument("path", type=click.Path(file_okay=False))
@click.option("--days", type=float, help="保留天数，0 表示全部删除（默认取配置）")
@dry_run_options
def sweep(path, days, confirm, dryrun, config_path, output_format):
    """清理单个目录"""
    config = load_config(config_path, output_format)
    try:
        context = SweepContext.from_days(config.sweep.days if days is None else days)
    except InvalidArgumentError as e:
        console.print(f"[red]参数错误: {e}[/red]")
        sys.exit(2)

    engine, sink = build_engine(config, resolve_dry_run(confirm, dryrun))
    with cancel_on_interrupt(engine):
        engine.sweep(path, context)

    print_summary(config, engine, sink)
    sys.exit(1 if sink.at_least_one_error else 0)


# ==================== 配置 ====================

@cli.group("config")
def config_group():
    """配置管理命令"""
    pass


@config_group.command("init")
@click.option("--path", "config_path", type=click.Path(dir_okay=False), help="配置文件路径")
def config_init(config_path):
    """创建默认配置文件"""
    path = Path(config_path) if config_path else Config.get_config_path()
    if path.exists():
        console.print(f"[yellow]配置文件已存在: {path}[/yellow]")
        return

    Config().save(path)
    console.print(f"[green]✅ 配置文件已创建: {path}[/green]")


@config_group.command("show")
@click.option("--path", "config_path", type=click.Path(dir_okay=False), help="配置文件路径")
@click.option("--format", "output_format", type=click.Choice(FORMATS), help="输出格式")
def config_show(config_path, output_format):
    """显示当前配置"""
    config = Config.load(Path(config_path) if config_path else None)
    formatter = OutputFormatter(output_format or config.output.format, color=config.output.color)

    data = config.to_dict()
    if formatter.format == "table":
        flat = {}
        for section, values in data.items():
            if isinstance(values, dict):
                for key, value in values.items():
                    flat[f"{section}.{key}"] = value
            else:
                flat[section] = values
        data = flat

    click.echo(formatter.format_dict(data, title="当前配置"))


if __name__ == "__main__":
    cli()
