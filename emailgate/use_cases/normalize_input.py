"""
Input normalizer - turns pasted text or an uploaded list into candidates.
"""

import re
from typing import Iterable, List, Union

from ..domain.errors import EmptyInput, TooManyCandidates

MAX_CANDIDATES = 100

_SEPARATORS = re.compile(r"[\n,;]")


def split_candidates(raw: Union[str, Iterable[str]]) -> List[str]:
    """Split on newline/comma/semicolon, trim, drop empties. Keeps duplicates."""
    chunks = [raw] if isinstance(raw, str) else list(raw)
    candidates = []
    for chunk in chunks:
        for piece in _SEPARATORS.split(chunk or ""):
            piece = piece.strip()
            if piece:
                candidates.append(piece)
    return candidates


def normalize_candidates(
    raw: Union[str, Iterable[str]],
    max_candidates: int = MAX_CANDIDATES,
) -> List[str]:
    """
    Returns the ordered, case-insensitively deduplicated candidate list.
    The first spelling of an address wins.

    Raises EmptyInput when nothing is left, TooManyCandidates when the
    deduplicated list is over `max_candidates`. Nothing is ever truncated.

    The cap counts distinct addresses, not raw entries: a pasted list of 120
    lines holding 80 distinct addresses is accepted, because duplicates never
    cost a lookup. The dashboard's own form counted raw entries instead.
    """
    seen = set()
    unique: List[str] = []
    for candidate in split_candidates(raw):
        key = candidate.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(candidate)

    if not unique:
        raise EmptyInput("No email addresses found in the input")
    if len(unique) > max_candidates:
        raise TooManyCandidates(count=len(unique), limit=max_candidates)
    return unique
