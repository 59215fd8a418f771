"""
Test support utilities for scriptlaunch tests.

Fakes and helpers that are not fixtures but are shared by several test
modules.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field

from rich.console import Console

from scriptlaunch.framework.lifecycle import RequestHandle


@dataclass
class RecordingLifecycle:
    """Request lifecycle that records every begin/end call in order."""

    events: list[tuple] = field(default_factory=list)
    fail_on_begin: Exception | None = None
    _open: list[RequestHandle] = field(default_factory=list)

    def begin(self) -> RequestHandle:
        if self.fail_on_begin is not None:
            raise self.fail_on_begin
        handle = RequestHandle()
        self._open.append(handle)
        self.events.append(("begin", handle.request_id))
        return handle

    def end(self, handle: RequestHandle, cause: BaseException | None = None) -> None:
        assert self._open and self._open[-1] is handle, "end() out of order"
        self._open.pop()
        self.events.append(("end", handle.request_id, cause))

    @property
    def begins(self) -> int:
        return sum(1 for e in self.events if e[0] == "begin")

    @property
    def ends(self) -> list[tuple]:
        return [e for e in self.events if e[0] == "end"]

    @property
    def is_balanced(self) -> bool:
        return not self._open and self.begins == len(self.ends)


class CapturedConsole:
    """A rich Console writing into memory."""

    def __init__(self) -> None:
        self.buffer = io.StringIO()
        self.console = Console(file=self.buffer, width=200, color_system=None)

    @property
    def text(self) -> str:
        return self.buffer.getvalue()
