"""Conversion of content offsets into line/column ranges.

Python 3.13+.
"""

from __future__ import annotations

from bisect import bisect_right

from .codes import DiagnosticRange, RangeElement, Span

__all__ = [
    "LineOffsetCache",
    "span_to_range",
]


class LineOffsetCache:
    """Cached line offsets for position lookups in one file's content.

    Precomputes line start offsets in a single pass, then answers lookups
    with a binary search.

    Example:
        >>> cache = LineOffsetCache("abc\\ndef\\nghi")
        >>> cache.get_line_col(0)
        (1, 1)
        >>> cache.get_line_col(4)  # 'd' in "def"
        (2, 1)
    """

    __slots__ = ("_offsets", "_source_len")

    def __init__(self, source: str) -> None:
        """Build line offset cache from source.

        Args:
            source: Content to index
        """
        offsets = [0]
        for i, char in enumerate(source):
            if char == "\n":
                offsets.append(i + 1)
        self._offsets: tuple[int, ...] = tuple(offsets)
        self._source_len = len(source)

    def resolve(self, pos: int) -> int:
        """Clamp an offset into the content, counting negatives from the end.

        Args:
            pos: Character offset; negative values count from the end

        Returns:
            Offset between 0 and the content length
        """
        if pos < 0:
            pos += self._source_len
        return min(max(pos, 0), self._source_len)

    def get_line_col(self, pos: int) -> tuple[int, int]:
        """Get line and column for an offset.

        Args:
            pos: Character offset (0-indexed, clamped into the content)

        Returns:
            (line, column) tuple, both 1-indexed
        """
        pos = min(max(pos, 0), self._source_len)
        line_index = bisect_right(self._offsets, pos) - 1
        return line_index + 1, pos - self._offsets[line_index] + 1

    def element(self, pos: int) -> RangeElement:
        """Get the range element for an offset."""
        index = self.resolve(pos)
        line, column = self.get_line_col(index)
        return RangeElement(line=line, column=column, index=index)


def span_to_range(span: Span, content: str | LineOffsetCache) -> DiagnosticRange:
    """Convert a span into a diagnostic range.

    Args:
        span: Offsets into the content; negative offsets count from the end
        content: File content, or a cache already built for it

    Returns:
        Range with 1-indexed lines and columns

    Example:
        >>> span_to_range(Span(4, 7), "abc\\ndef").start.line
        2
    """
    cache = content if isinstance(content, LineOffsetCache) else LineOffsetCache(content)
    return DiagnosticRange(start=cache.element(span.start), end=cache.element(span.end))
