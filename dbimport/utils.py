"""
Generic helpers that are reused across sub‑modules.
"""
from __future__ import annotations

import sqlparse
from sqlparse import tokens as T

_COMMENT_STARTS = ("-", "#", "/")


def is_blank(statement: str) -> bool:
    """
    True when *statement* holds nothing the server would execute: only
    whitespace and ``--``, ``#`` or ``/* */`` comments.

    Versioned comments (``/*!40101 SET NAMES utf8 */``) are executable
    and never count as blank.
    """
    text = statement.strip()
    if not text:
        return True
    if not text.startswith(_COMMENT_STARTS):
        return False

    for parsed in sqlparse.parse(text):
        for tok in parsed.flatten():
            if tok.is_whitespace:
                continue
            if tok.ttype in T.Comment and not tok.value.startswith("/*!"):
                continue
            return False
    return True


def preview(statement: str, width: int = 60) -> str:
    """One‑line abbreviation of *statement* for log messages."""
    line = " ".join(statement.split())
    return line if len(line) <= width else line[: width - 3] + "..."
