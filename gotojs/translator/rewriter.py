"""
Rewrite engine turning goto/label markers into native loops.

Gotos are rewritten in one global pass. Labels are rewritten one at a time:
each pass finds the first remaining marker, locates its enclosing block in
the current buffer, swaps the marker for a loop preamble and inserts the
loop's closing brace at the end of the block. The preamble is longer than
the marker, so the block end found before the swap is shifted by the
length difference. Recomputing the block for every label on the freshly
rewritten buffer means no global offset table is needed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from gotojs.core.errors import RewriteError
from gotojs.core.logging import get_logger

from .block_locator import BlockSpan, find_container
from .goto_grammar import GotoGrammar

logger = get_logger(__name__)


@dataclass
class LabelRewrite:
    """One label marker that was turned into a loop."""

    name: str
    """Label identifier"""

    offset: int
    """Offset of the marker in the buffer it was found in"""

    source_offset: int
    """Offset of the marker in the source before any rewriting"""

    span: BlockSpan
    """Enclosing block computed for the marker"""

    closed_at: int
    """Offset where the loop's closing brace was inserted"""

    enclosed: bool = True
    """False when either brace scan ran off the buffer"""


@dataclass
class RewriteResult:
    """Result of rewriting one shielded source unit."""

    code: str
    """Rewritten source"""

    labels: List[LabelRewrite] = field(default_factory=list)
    """Labels in the order they were processed"""

    goto_targets: List[str] = field(default_factory=list)
    """Targets of every rewritten goto, in source order"""


class GotoRewriter:
    """Applies the goto rule and the label fixed-point loop."""

    def __init__(self, grammar: GotoGrammar | None = None):
        self.grammar = grammar or GotoGrammar()

    def rewrite(self, source: str) -> RewriteResult:
        """
        Rewrite every goto, then every label.

        Args:
            source: Source with string literals already shielded

        Returns:
            RewriteResult with the new code and what was rewritten
        """
        goto_targets = self.grammar.goto_targets(source)
        # Gotos first: their replacement text never contains a label marker
        code = self.rewrite_gotos(source)
        code, labels = self.rewrite_labels(code, origin=source)
        return RewriteResult(code=code, labels=labels, goto_targets=goto_targets)

    def rewrite_gotos(self, source: str) -> str:
        """Replace every ``goto name;`` with a sentinel reset and a continue."""
        return self.grammar.GOTO_RE.sub(
            lambda match: self.grammar.render_goto(match.group(1)), source
        )

    def rewrite_labels(self, source: str, origin: str | None = None) -> tuple[str, List[LabelRewrite]]:
        """
        Replace label markers with loop preambles until none remain.

        Args:
            source: Text to rewrite
            origin: Text that ``source_offset`` values refer to (defaults to ``source``)

        Raises:
            RewriteError: if a pass fails to consume exactly one marker
        """
        code = source
        rewritten: List[LabelRewrite] = []
        remaining = self.grammar.count_labels(code)
        # Markers are consumed left to right, so pass k handles the k-th original marker
        origin_offsets = self.grammar.label_offsets(source if origin is None else origin)

        match = self.grammar.find_label(code)
        while match:
            name = match.group(1)

            # Block boundaries come from the buffer as it is now
            container = find_container(match.start(), code)
            enclosed = container.has_opening and container.has_closing(code)

            # Swap the marker for the loop header and remember how much longer it is
            preamble = self.grammar.render_label(name)
            add_length = len(preamble) - len(match.group(0))
            code = code[:match.start()] + preamble + code[match.end():]

            # Everything after the marker moved right by add_length
            close_at = container.end + add_length
            code = code[:close_at] + "}" + code[close_at:]

            logger.debug(
                "Rewrote label %r at %d, block %d..%d, loop closed at %d",
                name, match.start(), container.start, container.end, close_at,
            )
            rewritten.append(LabelRewrite(
                name=name, offset=match.start(),
                source_offset=origin_offsets[len(rewritten)], span=container,
                closed_at=close_at, enclosed=enclosed,
            ))

            # Each pass must consume exactly one marker or the loop never ends
            left = self.grammar.count_labels(code)
            if left != remaining - 1:
                raise RewriteError(
                    f"Label pass for {name!r} left {left} marker(s), expected {remaining - 1}",
                    remaining_labels=left,
                )
            remaining = left
            match = self.grammar.find_label(code)

        return code, rewritten
