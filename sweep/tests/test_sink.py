"""
测试结果输出
"""

import logging

from ..sink import ConsoleResultSink, LoggingResultSink


def test_console_sink(capsys):
    """测试控制台输出和错误计数"""
    sink = ConsoleResultSink(color=False)

    sink.message("deleting: /tmp/a")
    assert not sink.at_least_one_error

    sink.error("/tmp/b: denied")
    sink.error("/tmp/c: denied")

    captured = capsys.readouterr()
    assert "deleting: /tmp/a" in captured.out
    assert "Error: /tmp/b: denied" in captured.err
    assert sink.at_least_one_error
    assert sink.error_count == 2


def test_console_sink_quiet(capsys):
    """测试安静模式只输出错误"""
    sink = ConsoleResultSink(color=False, quiet=True)

    sink.message("deleting: /tmp/a")
    sink.error("boom")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Error: boom" in captured.err


def test_console_sink_no_markup(capsys):
    """测试路径中的方括号原样输出"""
    sink = ConsoleResultSink(color=False)

    sink.message("deleting: /tmp/[red]x")

    assert "/tmp/[red]x" in capsys.readouterr().out


def test_logging_sink(caplog):
    """测试日志输出"""
    sink = LoggingResultSink(logging.getLogger("test.sink"))

    with caplog.at_level(logging.INFO, logger="test.sink"):
        sink.message("hello")
        sink.error("oops")

    assert "hello" in caplog.text
    assert "oops" in caplog.text
    assert sink.at_least_one_error
