"""
String literal shielding for goto translation.

Keywords inside string literals must not be rewritten, so before any
rewrite pass every quoted literal is swapped for one opaque placeholder
token and remembered in order. After rewriting, the placeholders are
replaced back with the original literals, first in first out.

Two scanners decide where literals are:

- RegexLiteralScanner: the default, a single regular expression over
  single- and double-quoted strings
- PygmentsLiteralScanner: token-aware, uses the Pygments JavaScript lexer
  so quotes inside comments and regex literals are ignored
"""

from __future__ import annotations

import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple

from pygments.lexers import get_lexer_by_name
from pygments.token import Token


Span = Tuple[int, int]


def make_placeholder() -> str:
    """Return a placeholder token derived from the current time in milliseconds."""
    return "_" + str(time.time_ns() // 1_000_000)


class LiteralScanner(ABC):
    """Finds the string literals in a piece of source code."""

    @abstractmethod
    def scan(self, source: str) -> List[Span]:
        """
        Locate string literals.

        Args:
            source: Source code to scan

        Returns:
            Non-overlapping (start, end) offsets of each literal, quotes
            included, in left-to-right order
        """


class RegexLiteralScanner(LiteralScanner):
    """
    Regex-based literal scanner.

    A literal opens with ' or " and closes at the next matching quote that is
    not written as an escaped quote. Content is matched non-greedily and may
    not span lines. An odd run of trailing backslashes can end a literal in
    the wrong place; that is an accepted approximation.
    """

    LITERAL_RE = re.compile(r"""(["'])((?:\\\1|.)*?)\1""")

    def scan(self, source: str) -> List[Span]:
        return [match.span() for match in self.LITERAL_RE.finditer(source)]


class PygmentsLiteralScanner(LiteralScanner):
    """
    Token-aware literal scanner built on the Pygments JavaScript lexer.

    Only single- and double-quoted string tokens are shielded. Template
    literals are left alone since their interpolations hold live code.
    """

    SHIELDED_TOKENS = (Token.Literal.String.Double, Token.Literal.String.Single)

    def __init__(self):
        self._lexer = get_lexer_by_name("javascript")

    def scan(self, source: str) -> List[Span]:
        spans: List[Span] = []
        for index, ttype, value in self._lexer.get_tokens_unprocessed(source):
            # ``in`` also matches subtypes of each shielded type
            if any(ttype in shielded for shielded in self.SHIELDED_TOKENS):
                spans.append((index, index + len(value)))
        return spans


@dataclass
class ShieldResult:
    """Result of shielding the literals of a source unit."""

    text: str
    """Source with every literal replaced by the placeholder"""

    literals: List[str]
    """Original literal texts, quotes included, in order of appearance"""

    placeholder: str
    """Token standing in for each literal"""


@dataclass
class RestoreResult:
    """Result of putting shielded literals back."""

    text: str
    """Text with placeholders replaced by their literals"""

    unresolved: int
    """Placeholders left in place because the literal list ran out"""

    unused: int
    """Literals never consumed because there were fewer placeholders"""


class LiteralShield:
    """
    Hides string literal content from the rewrite passes.

    Example:
        >>> shield = LiteralShield(placeholder="_P")
        >>> result = shield.shield('var s = "goto top;";')
        >>> result.text
        'var s = _P;'
        >>> shield.restore(result.text, result.literals, result.placeholder).text
        'var s = "goto top;";'
    """

    def __init__(self, scanner: LiteralScanner | None = None, placeholder: str | None = None):
        self.scanner = scanner or RegexLiteralScanner()
        self._placeholder = placeholder

    def shield(self, source: str) -> ShieldResult:
        """
        Replace every literal in ``source`` with the placeholder token.

        Args:
            source: Raw source code

        Returns:
            ShieldResult with the shielded text and the literals in order
        """
        placeholder = self._placeholder or make_placeholder()
        literals: List[str] = []
        pieces: List[str] = []
        pos = 0

        # Keep the code between literals, swap each literal for the token
        for start, end in self.scanner.scan(source):
            pieces.append(source[pos:start])
            pieces.append(placeholder)
            literals.append(source[start:end])
            pos = end
        pieces.append(source[pos:])

        return ShieldResult(text="".join(pieces), literals=literals, placeholder=placeholder)

    def restore(self, text: str, literals: List[str], placeholder: str) -> RestoreResult:
        """
        Replace placeholders left to right with the next unconsumed literal.

        Placeholders beyond the number of literals are left unresolved.

        Args:
            text: Shielded (and possibly rewritten) text
            literals: Literals recorded by :meth:`shield`
            placeholder: Placeholder token used by :meth:`shield`

        Returns:
            RestoreResult with the restored text and mismatch counts
        """
        pending = iter(literals)
        consumed = 0
        unresolved = 0

        def repl(match: re.Match[str]) -> str:
            nonlocal consumed, unresolved
            literal = next(pending, None)
            # Out of literals: leave the token for the caller to report
            if literal is None:
                unresolved += 1
                return match.group(0)
            consumed += 1
            return literal

        restored = re.sub(re.escape(placeholder), repl, text)
        return RestoreResult(text=restored, unresolved=unresolved, unused=len(literals) - consumed)
