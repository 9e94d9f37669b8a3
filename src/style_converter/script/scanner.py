"""Brace matching over raw script text.

The scanner does not tokenize JavaScript. It only tracks brace depth, the
active string quote and backslash escapes, which is enough to find the end of
a function body or object literal whose braces may also appear in strings.
"""

from __future__ import annotations

from dataclasses import dataclass

QUOTES = frozenset({'"', "'", "`"})


@dataclass(frozen=True, slots=True)
class BlockSpan:
    start: int
    end: int
    code: str

    def __len__(self) -> int:
        return self.end - self.start


def find_block_end(text: str, start: int) -> int | None:
    """Return the index just past the brace that closes the first ``{`` at or after *start*."""

    depth = 0
    quote: str | None = None
    escaped = False
    for index in range(max(start, 0), len(text)):
        char = text[index]
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        if quote is not None:
            if char == quote:
                quote = None
            continue
        if char in QUOTES:
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                return index + 1
    return None


def extract_balanced_block(text: str, start: int) -> BlockSpan | None:
    """Extract the balanced block opening at or after *start*.

    The span begins at *start* and runs through the matching closing brace.
    ``None`` means the text ended before the block closed.
    """

    end = find_block_end(text, start)
    if end is None:
        return None
    start = max(start, 0)
    return BlockSpan(start=start, end=end, code=text[start:end])


__all__ = ["BlockSpan", "extract_balanced_block", "find_block_end"]
