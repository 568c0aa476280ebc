"""Clause segmentation.

Splits plain document text into clause-sized segments using a paragraph
and sentence-boundary heuristic. The heuristic is a plain function from
text to ordered segments, so a smarter sentence splitter can be dropped
into ``ClauseSegmenter`` without touching the compliance engine.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from .models import Clause, new_id

logger = logging.getLogger(__name__)

# Upper bound on clauses kept from a single document
MAX_CLAUSES = 250

# Blank-line paragraph break, or the whitespace after a period that is
# followed by a capital letter (the period stays with the left segment)
_BOUNDARY_RE = re.compile(
    r"""
    \n{2,}                  # paragraph break
    |(?<=\.)\s+(?=[A-Z])    # sentence boundary before a capital
    """,
    re.VERBOSE,
)

SegmentStrategy = Callable[[str], list[str]]


def split_clauses(text: str) -> list[str]:
    """Split text on paragraph breaks and sentence boundaries.

    Args:
        text: Plain document text.

    Returns:
        Trimmed, non-empty segments in document order.
    """
    parts = (part.strip() for part in _BOUNDARY_RE.split(text))
    return [part for part in parts if part]


class ClauseSegmenter:
    """Turn document text into an ordered list of clauses.

    Example::

        segmenter = ClauseSegmenter()
        clauses = segmenter.segment(document_text)
        for clause in clauses:
            print(f"{clause.id}: {clause.text[:80]}")

    Args:
        strategy: Function splitting text into segments. Defaults to
            ``split_clauses``.
        max_clauses: Segments past this count are dropped.
    """

    def __init__(
        self,
        strategy: SegmentStrategy | None = None,
        max_clauses: int = MAX_CLAUSES,
    ) -> None:
        self.strategy = strategy or split_clauses
        self.max_clauses = max_clauses

    def segment(self, text: object) -> list[Clause]:
        """Segment text into clauses with fresh ids.

        Non-string input is treated as empty text and yields no clauses.
        Segments from the strategy are trimmed and empty ones dropped.
        Page and offset fields are left unset.
        """
        if not isinstance(text, str):
            text = ""

        segments = [s.strip() for s in self.strategy(text) if s.strip()]
        if len(segments) > self.max_clauses:
            logger.debug(
                "Dropping %d segments past the %d clause cap",
                len(segments) - self.max_clauses,
                self.max_clauses,
            )
            segments = segments[: self.max_clauses]

        return [Clause(id=new_id(), text=segment) for segment in segments]
