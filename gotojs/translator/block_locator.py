"""
Block location for label rewriting.

A label becomes a ``while`` loop whose closing brace must land at the end
of the block the label sits in, so a jump target never straddles unrelated
scopes. The block is found by counting brace parity outward from the label.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class BlockSpan(BaseModel):
    """
    Brace-delimited region enclosing an offset.

    ``start`` is the offset of the opening brace, or -1 when there is none.
    ``end`` is the offset of the matching closing brace, or the length of the
    text when there is none. The interior is ``text[start + 1:end]``.
    """

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=-1)
    end: int = Field(..., ge=0)

    @property
    def has_opening(self) -> bool:
        return self.start >= 0

    def has_closing(self, text: str) -> bool:
        """True when the forward scan stopped on a real closing brace."""
        return self.end < len(text)

    def inner(self, text: str) -> str:
        """Text between the braces."""
        return text[self.start + 1:self.end]

    def outer(self, text: str) -> str:
        """Text of the block including its braces (where present)."""
        # Slicing clamps a missing closing brace to the end of the text
        return text[max(self.start, 0):self.end + 1]


def find_container(loc: int, source: str) -> BlockSpan:
    """
    Find the braces surrounding ``loc``.

    The backward scan starts with a depth of -1 and stops once an unmatched
    ``{`` brings it to 0. The forward scan starts with a depth of 1 and stops
    once an unmatched ``}`` brings it to 0. The scans are independent, so a
    label next to a brace in malformed input may get a start and an end from
    different blocks.

    Args:
        loc: Offset inside ``source``, normally the start of a label marker
        source: Text being rewritten

    Returns:
        BlockSpan for the innermost enclosing block
    """
    length = len(source)

    # Walk left to the unmatched opening brace
    i = loc
    depth = -1
    while i >= 0 and depth != 0:
        i -= 1
        if i < 0:
            break
        if source[i] == "{":
            depth += 1
        elif source[i] == "}":
            depth -= 1
    start = i  # -1 if the scan ran off the start

    # Walk right to the unmatched closing brace
    i = loc
    depth = 1
    while i < length and depth != 0:
        i += 1
        if i >= length:
            break
        if source[i] == "{":
            depth += 1
        elif source[i] == "}":
            depth -= 1
    end = i  # len(source) if the scan ran off the end

    return BlockSpan(start=start, end=end)
