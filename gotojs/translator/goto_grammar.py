"""
Keyword patterns and replacement templates for the goto extension.

The extension adds two statements to JavaScript:

- ``[lbl] name:`` declares a jump target
- ``goto name;`` jumps back to it

Matching is regex based and case-insensitive. A label becomes a labeled
``while`` loop guarded by a sentinel variable, and a goto becomes a
sentinel reset followed by ``continue name;``. Keeping the patterns and
templates here lets a different keyword matcher be dropped in without
touching the rewrite loop.
"""

from __future__ import annotations

import re
from typing import List, Optional


SENTINEL_PREFIX = "goto_function_"


class GotoGrammar:
    """Recognizes label and goto markers and renders their replacements."""

    LABEL_RE = re.compile(r"\[lbl\]\s+(\w+)\s*:", re.IGNORECASE | re.MULTILINE)
    GOTO_RE = re.compile(r"goto\s+(\w+)\s*;", re.IGNORECASE | re.MULTILINE)

    def sentinel(self, name: str) -> str:
        return SENTINEL_PREFIX + name

    def find_label(self, source: str) -> Optional[re.Match[str]]:
        """Return the first label marker in ``source``, if any."""
        return self.LABEL_RE.search(source)

    def count_labels(self, source: str) -> int:
        return len(self.LABEL_RE.findall(source))

    def label_offsets(self, source: str) -> List[int]:
        """Start offsets of all label markers, in order."""
        return [match.start() for match in self.LABEL_RE.finditer(source)]

    def goto_targets(self, source: str) -> List[str]:
        """Targets of all goto markers, in order, duplicates kept."""
        return self.GOTO_RE.findall(source)

    def render_goto(self, name: str) -> str:
        """
        Replacement for ``goto name;``.

        Returns:
            ``goto_function_name = false;`` then ``continue name;`` on a new line
        """
        sentinel = self.sentinel(name)
        return f"{sentinel} = false;\n continue {name};"

    def render_label(self, name: str) -> str:
        """
        Loop preamble replacing ``[lbl] name:``.

        The sentinel is declared false, the loop runs while it is false, and
        the first statement of each pass sets it true so that the loop exits
        after one pass unless a goto resets it.
        """
        sentinel = self.sentinel(name)
        return (
            f"var {sentinel} = false;\n"
            f"{name}: while(!{sentinel}){{\n"
            f" {sentinel} = true;\n"
        )
