# tests/unit/test_logging.py
"""测试日志配置：JSON 输出可被机器解析，控制台输出为单行。"""

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from chat_translator.logging_config import RichLineRenderer, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None, None, None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_json_format_emits_parseable_lines(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logging(log_level="DEBUG", log_format="json")

    structlog.get_logger("chat_translator.test").info("翻译完成", provider="gemini")

    records = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
    setup_record = next(r for r in records if r["event"] == "日志系统已配置完成。")
    assert setup_record["log_format"] == "json"
    assert setup_record["app_log_level"] == "DEBUG"
    record = next(r for r in records if r["event"] == "翻译完成")
    assert record["provider"] == "gemini"
    assert record["level"] == "info"
    assert record["logger"] == "chat_translator.test"


def test_app_level_filters_debug(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logging(log_level="INFO", log_format="json")

    structlog.get_logger("chat_translator.test").debug("不应出现")

    assert "不应出现" not in capsys.readouterr().err


def test_rich_line_renderer_renders_single_line() -> None:
    renderer = RichLineRenderer(show_timestamp=False, kv_truncate_at=10)

    rendered = renderer(
        None,
        "info",
        {
            "event": "服务商调用失败",
            "level": "warning",
            "logger": "chat_translator.coordinator",
            "error_kind": "transport",
            "detail": "x" * 50,
        },
    )

    assert "\n" not in rendered
    assert rendered.startswith("WARNING")
    assert "服务商调用失败" in rendered
    assert "(chat_translator.coordinator)" in rendered
    assert "error_kind=transport" in rendered
    assert "detail=xxxxxxxxx…" in rendered


def test_rich_line_renderer_appends_exception() -> None:
    renderer = RichLineRenderer(show_timestamp=False, show_logger_name=False)

    rendered = renderer(
        None,
        "error",
        {"event": "boom", "level": "error", "exception": "Traceback: ZeroDivisionError"},
    )

    first, second = rendered.split("\n", 1)
    assert first.startswith("ERROR")
    assert second == "Traceback: ZeroDivisionError"
