"""Progress narration for searches and sweeps.

The engine only decides *when* to narrate and *what* to say; a
:class:`ProgressSink` decides how it is shown. Sinks are passed in explicitly
and never looked up globally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Literal, Protocol, Tuple, runtime_checkable

from rich.console import Console
from rich.status import Status

from plansearch.utils.logging import get_logger

ProgressEvent = Literal["report", "succeed", "fail"]


@runtime_checkable
class ProgressSink(Protocol):
    """Capability set for status narration."""

    def report(self, message: str) -> None:
        """Replace the current status text."""

    def succeed(self, message: str) -> None:
        """Announce that a step finished successfully."""

    def fail(self, message: str) -> None:
        """Announce that a step failed or produced nothing."""


class NullProgress:
    """Discard every event."""

    def report(self, message: str) -> None:
        return None

    def succeed(self, message: str) -> None:
        return None

    def fail(self, message: str) -> None:
        return None


@dataclass
class RecordingProgress:
    """Keep every event in order, for tests and later replay."""

    events: List[Tuple[ProgressEvent, str]] = field(default_factory=list)

    def report(self, message: str) -> None:
        self.events.append(("report", message))

    def succeed(self, message: str) -> None:
        self.events.append(("succeed", message))

    def fail(self, message: str) -> None:
        self.events.append(("fail", message))

    def messages(self, kind: ProgressEvent | None = None) -> List[str]:
        return [message for event, message in self.events if kind is None or event == kind]


class CallbackProgress:
    """Push every event to ``callback(event, message)``."""

    def __init__(self, callback: Callable[[ProgressEvent, str], None]) -> None:
        self._callback = callback

    def report(self, message: str) -> None:
        self._callback("report", message)

    def succeed(self, message: str) -> None:
        self._callback("succeed", message)

    def fail(self, message: str) -> None:
        self._callback("fail", message)


class LoggingProgress:
    """Write events to the loguru log."""

    def __init__(self, **context: object) -> None:
        self._logger = get_logger(component="progress", **context)

    def report(self, message: str) -> None:
        self._logger.info(message)

    def succeed(self, message: str) -> None:
        self._logger.success(message)

    def fail(self, message: str) -> None:
        self._logger.warning(message)


class ConsoleProgress:
    """Interactive spinner on a rich console.

    ``report`` updates the spinner text; ``succeed`` and ``fail`` print a
    persistent line above it. The spinner starts on the first ``report`` and
    stops on :meth:`stop` or when used as a context manager.
    """

    def __init__(self, console: Console | None = None, *, spinner: str = "dots") -> None:
        self.console = console or Console()
        self._spinner = spinner
        self._status: Status | None = None

    def __enter__(self) -> "ConsoleProgress":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def report(self, message: str) -> None:
        if self._status is None:
            self._status = self.console.status(message, spinner=self._spinner)
            self._status.start()
        else:
            self._status.update(message)

    def succeed(self, message: str) -> None:
        self.console.print(f"[bold green]✔[/bold green] {message}")

    def fail(self, message: str) -> None:
        self.console.print(f"[bold red]✖[/bold red] {message}")

    def stop(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None


__all__ = [
    "CallbackProgress",
    "ConsoleProgress",
    "LoggingProgress",
    "NullProgress",
    "ProgressEvent",
    "ProgressSink",
    "RecordingProgress",
]
