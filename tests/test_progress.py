"""Tests for progress sinks."""

from __future__ import annotations

import io

from loguru import logger
from rich.console import Console

from plansearch.progress import (
    CallbackProgress,
    ConsoleProgress,
    LoggingProgress,
    NullProgress,
    ProgressSink,
    RecordingProgress,
)


def test_every_sink_satisfies_the_protocol() -> None:
    sinks = [
        NullProgress(),
        RecordingProgress(),
        CallbackProgress(lambda event, message: None),
        LoggingProgress(),
        ConsoleProgress(Console(file=io.StringIO())),
    ]

    assert all(isinstance(sink, ProgressSink) for sink in sinks)


def test_recording_progress_keeps_order() -> None:
    progress = RecordingProgress()
    progress.report("Scraping page 1 of 2")
    progress.succeed("Scraped 2 pages")
    progress.fail("There aren't any results")

    assert progress.events == [
        ("report", "Scraping page 1 of 2"),
        ("succeed", "Scraped 2 pages"),
        ("fail", "There aren't any results"),
    ]
    assert progress.messages("succeed") == ["Scraped 2 pages"]


def test_callback_progress_forwards_events() -> None:
    seen: list[tuple[str, str]] = []
    progress = CallbackProgress(lambda event, message: seen.append((event, message)))

    progress.report("a")
    progress.fail("b")

    assert seen == [("report", "a"), ("fail", "b")]


def test_console_progress_prints_outcomes() -> None:
    buffer = io.StringIO()
    console = Console(file=buffer, width=120)

    with ConsoleProgress(console) as progress:
        progress.report("Scraping page 1 of 2")
        progress.report("Scraping page 2 of 2")
        progress.succeed("Scraped 2 pages")
        progress.fail("No results to save")

    output = buffer.getvalue()
    assert "✔ Scraped 2 pages" in output
    assert "✖ No results to save" in output
    assert progress._status is None


def test_logging_progress_writes_log_lines() -> None:
    lines: list[str] = []
    sink_id = logger.add(lambda message: lines.append(str(message).strip()), format="{level}|{message}")
    try:
        progress = LoggingProgress(query="lot 5")
        progress.report("Scraping page 1 of 1")
        progress.succeed("Scraped 1 pages")
        progress.fail("Failed")
    finally:
        logger.remove(sink_id)

    assert lines == ["INFO|Scraping page 1 of 1", "SUCCESS|Scraped 1 pages", "WARNING|Failed"]
