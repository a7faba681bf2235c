"""
Streaming statement splitter for SQL dump files.

The splitter is fed one character at a time and calls its statement handler
whenever the current delimiter is seen outside a quoted literal.  It knows
nothing about SQL grammar; it only tracks

* single / double quoted literals, with backslash escaping,
* the current delimiter, which a ``DELIMITER <token>`` line may change.

State survives between calls, so input may arrive in chunks of any size.
"""
from __future__ import annotations

import typing as t

from dbimport.constants import DEFAULT_DELIMITER, DELIMITER_KEYWORD

StatementHandler = t.Callable[[str], None]

_QUOTES = ("'", '"')
_NEWLINES = ("\n", "\r")


class ParserState:
    """Mutable state of one splitter.  Never shared between files."""

    def __init__(self, delimiter: str = DEFAULT_DELIMITER) -> None:
        if not delimiter:
            raise ValueError("delimiter must not be empty")
        self.delimiter: str = delimiter
        self.quote_type: str | None = None
        self.escaped: bool = False
        self.buffer: list[str] = []
        self.seeking_delimiter: bool = False
        # non-whitespace characters currently in ``buffer``
        self.nonblank: int = 0

    def clear_buffer(self) -> None:
        self.buffer = []
        self.nonblank = 0

    def buffered_text(self) -> str:
        return "".join(self.buffer)


def _ignore(_statement: str) -> None:
    pass


class StatementSplitter:
    """
    Character‑level state machine that cuts a dump into statements.

    Each call to :meth:`feed_char` runs the same five steps in a fixed
    order: escape tracking, append, ``DELIMITER`` directive handling, quote
    tracking and finally boundary detection.  A completed statement is
    handed to the registered handler, trimmed and without its delimiter.
    Empty statements are emitted too; the caller decides what to do with
    them.

    Whatever is left in the buffer when input ends (trailing whitespace,
    comments or an unterminated statement) is never emitted.  Use
    :attr:`residual` to inspect it.
    """

    def __init__(self, delimiter: str = DEFAULT_DELIMITER) -> None:
        self.state = ParserState(delimiter)
        self._handler: StatementHandler = _ignore

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #
    @property
    def delimiter(self) -> str:
        return self.state.delimiter

    @property
    def residual(self) -> str:
        """Text buffered since the last statement boundary."""
        return self.state.buffered_text()

    def on_statement(self, handler: StatementHandler) -> None:
        """Register the callback invoked synchronously for each statement."""
        if not callable(handler):
            raise TypeError("statement handler must be callable")
        self._handler = handler

    def feed(self, text: str) -> None:
        for char in text:
            self.feed_char(char)

    def feed_char(self, char: str) -> None:
        st = self.state
        self._track_escape()
        st.buffer.append(char)
        if not char.isspace():
            st.nonblank += 1

        self._check_directive(char)
        if st.seeking_delimiter:
            # the directive line is the new delimiter token, not SQL
            return

        self._track_quote(char)
        self._check_boundary(char)

    # --------------------------------------------------------------------- #
    # Steps
    # --------------------------------------------------------------------- #
    def _track_escape(self) -> None:
        st = self.state
        if st.buffer and st.buffer[-1] == "\\":
            # toggle, so that "\\" cancels itself out
            st.escaped = not st.escaped
        else:
            st.escaped = False

    def _check_directive(self, char: str) -> None:
        st = self.state
        if st.seeking_delimiter:
            if char in _NEWLINES:
                token = st.buffered_text().strip()
                if token:
                    st.delimiter = token
                st.seeking_delimiter = False
                st.clear_buffer()
            return

        if st.quote_type is not None:
            return
        # the trimmed buffer equals the keyword only when the keyword is
        # its sole non-blank content and was just completed
        if st.nonblank != len(DELIMITER_KEYWORD) or char.lower() != DELIMITER_KEYWORD[-1]:
            return
        tail = "".join(st.buffer[-len(DELIMITER_KEYWORD):]).lower()
        if tail == DELIMITER_KEYWORD:
            st.seeking_delimiter = True
            st.clear_buffer()

    def _track_quote(self, char: str) -> None:
        st = self.state
        if char not in _QUOTES or st.escaped:
            return
        if st.quote_type == char:
            st.quote_type = None
        elif st.quote_type is None:
            st.quote_type = char

    def _check_boundary(self, char: str) -> None:
        st = self.state
        delim = st.delimiter
        if st.quote_type is not None or char != delim[-1] or len(st.buffer) < len(delim):
            return
        if "".join(st.buffer[-len(delim):]) != delim:
            return

        del st.buffer[-len(delim):]
        statement = st.buffered_text().strip()
        st.clear_buffer()
        self._handler(statement)


def split_statements(text: str, delimiter: str = DEFAULT_DELIMITER) -> list[str]:
    """
    Split a whole script held in memory.

    Returns every emitted statement, empty ones included; an unterminated
    tail is dropped exactly as in streaming mode.
    """
    found: list[str] = []
    splitter = StatementSplitter(delimiter)
    splitter.on_statement(found.append)
    splitter.feed(text)
    return found
