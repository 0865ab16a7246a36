from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Literal, Protocol, TextIO

NoticeStyle = Literal["success", "failure"]


@dataclass(frozen=True)
class Notice:
    """A short user-facing notification: title plus optional detail line."""

    style: NoticeStyle
    title: str
    message: str | None = None


class Notifier(Protocol):
    async def notify(self, notice: Notice) -> None: ...


class ConsoleNotifier:
    """Prints notices for the CLI; failures go to stderr."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self._out = out or sys.stdout
        self._err = err or sys.stderr

    async def notify(self, notice: Notice) -> None:
        stream = self._out if notice.style == "success" else self._err
        mark = "✓" if notice.style == "success" else "✗"
        line = f"{mark} {notice.title}"
        if notice.message:
            line += f": {notice.message}"
        print(line, file=stream)


class RecordingNotifier:
    """Keeps every notice in memory; handy for embedding and tests."""

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    async def notify(self, notice: Notice) -> None:
        self.notices.append(notice)
