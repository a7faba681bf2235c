"""
Serialises incoming chunks into a :class:`StatementSplitter`.
"""
from __future__ import annotations

import collections
import typing as t

from dbimport.parser.splitter import StatementSplitter

DrainedHandler = t.Callable[[], None]


def _noop() -> None:
    pass


class ChunkFeeder:
    """
    Queue of pending chunks in front of a splitter.

    A chunk that arrives while another one is being drained (for example
    from inside a statement handler) is queued and handled afterwards, so
    characters always reach the splitter in arrival order.
    """

    def __init__(self, splitter: StatementSplitter) -> None:
        self.splitter = splitter
        self.pending: collections.deque[str] = collections.deque()
        self.draining: bool = False
        self._drained: DrainedHandler = _noop

    @property
    def idle(self) -> bool:
        return not self.draining and not self.pending

    def enqueue(self, chunk: str) -> None:
        self.pending.append(chunk)
        if not self.draining:
            self._drain()

    def on_drained(self, handler: DrainedHandler) -> None:
        """
        Register *handler* to run whenever the queue has been emptied.

        When nothing is being drained right now the handler runs
        immediately, before this method returns.
        """
        if not callable(handler):
            raise TypeError("drained handler must be callable")
        self._drained = handler
        if not self.draining:
            handler()

    def _drain(self) -> None:
        self.draining = True
        try:
            while self.pending:
                chunk = self.pending.popleft()
                for char in chunk:
                    self.splitter.feed_char(char)
        finally:
            self.draining = False
        self._drained()
