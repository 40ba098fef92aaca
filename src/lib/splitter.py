"""
Delimiter splitter

Partitions a string into alternating literal and expression segments for
a single delimiter string.

Splitting the input on every non-overlapping occurrence of the delimiter
gives a list of runs. Even-indexed runs (0, 2, 4, ...) are literal text,
odd-indexed runs (1, 3, 5, ...) are raw expressions. The delimiters
themselves are consumed.

Example:
    >>> delimiters_split("a $x$ b", "$")
    [Literal(text='a '), Expression(raw='x', unmatched=False), Literal(text=' b')]
"""

from typing import List

from ..models.segments import Literal, Expression, Segment
from .log import LOG


def delimiters_count(text: str, delimiter: str) -> int:
    """Number of non-overlapping occurrences of ``delimiter`` in ``text``."""
    if not delimiter:
        raise ValueError("delimiter must be a non-empty string")
    return text.count(delimiter)


def delimiters_split(text: str, delimiter: str) -> List[Segment]:
    """
    Split ``text`` into Literal/Expression segments on ``delimiter``

    An odd number of delimiters leaves the last run without a closing
    marker. That run is still returned as an Expression, flagged
    ``unmatched``; callers decide whether to render it or keep it as text.

    Two adjacent delimiters produce an empty Expression.

    Args:
        text: Input string
        delimiter: Non-empty marker string

    Returns:
        Segments in source order, always starting with a Literal

    Raises:
        ValueError: If ``delimiter`` is empty
    """
    if not delimiter:
        raise ValueError("delimiter must be a non-empty string")

    runs = text.split(delimiter)
    segments: List[Segment] = []

    for index, run in enumerate(runs):
        if index % 2 == 0:
            segments.append(Literal(run))
        else:
            segments.append(Expression(run))

    # an even number of runs means an odd number of delimiters
    if len(runs) % 2 == 0:
        segments[-1] = Expression(runs[-1], unmatched=True)
        LOG(f"Unmatched '{delimiter}' before {runs[-1][:40]!r}", level=3)

    LOG(f"Split on '{delimiter}' into {len(segments)} segments", level=3)
    return segments


def segments_join(segments: List[Segment], delimiter: str) -> str:
    """
    Rebuild source text from segments by re-inserting delimiters

    Inverse of delimiters_split() for the same delimiter: an Expression is
    wrapped in the delimiter on both sides, or only on the left if it was
    unmatched.
    """
    parts = []
    for segment in segments:
        if isinstance(segment, Expression):
            closing = "" if segment.unmatched else delimiter
            parts.append(f"{delimiter}{segment.raw}{closing}")
        else:
            parts.append(segment.text)
    return "".join(parts)
