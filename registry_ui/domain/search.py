"""
Incremental prefix search and match highlighting over the package catalog.

Everything here is pure: the same catalog and query always produce the
same result, so callers may discard stale results without cancellation.
"""
from __future__ import annotations

import unicodedata
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from registry_ui.domain.models import HighlightRange, MatchField, MatchResult, PackageRecord

MAX_SUGGESTIONS = 5

# Latin letters that have no canonical decomposition into base + mark.
_DEBURR_LETTERS = {
    "ß": "ss",
    "æ": "ae",
    "Æ": "Ae",
    "œ": "oe",
    "Œ": "Oe",
    "ø": "o",
    "Ø": "O",
    "đ": "d",
    "Đ": "D",
    "ð": "d",
    "Ð": "D",
    "ł": "l",
    "Ł": "L",
    "þ": "th",
    "Þ": "Th",
    "ı": "i",
}


def deburr(value: str) -> str:
    """
    Convert Latin-1 supplement and Latin Extended-A letters to basic Latin
    letters and remove combining diacritical marks.
    """
    decomposed = unicodedata.normalize("NFKD", value)
    out: List[str] = []
    for ch in decomposed:
        if unicodedata.combining(ch):
            continue
        out.append(_DEBURR_LETTERS.get(ch, ch))
    return "".join(out)


def normalize_query(query: Optional[str]) -> str:
    """Trim, strip diacritics and lower-case a raw query."""
    if not query:
        return ""
    return deburr(query.strip()).lower()


def _has_prefix(value: Any, prefix: str) -> bool:
    if not value or not isinstance(value, str):
        return False
    return value.lower().startswith(prefix)


def matching_fields(record: PackageRecord, normalized_query: str) -> List[MatchField]:
    """
    Return which fields of ``record`` start with ``normalized_query``.

    All three fields are tested, in priority order label, version, keywords.
    """
    fields: List[MatchField] = []
    if _has_prefix(record.label, normalized_query):
        fields.append("label")
    if _has_prefix(record.version, normalized_query):
        fields.append("version")
    if any(_has_prefix(keyword, normalized_query) for keyword in record.keyword_values()):
        fields.append("keywords")
    return fields


def filter_packages(
    catalog: Iterable[PackageRecord],
    query: Optional[str],
    limit: int = MAX_SUGGESTIONS,
) -> List[MatchResult]:
    """
    Select at most ``limit`` records whose label, version or any keyword
    starts with the normalized query, in catalog order.

    An empty normalized query is the idle state and yields no results.
    """
    normalized = normalize_query(query)
    if not normalized:
        return []

    results: List[MatchResult] = []
    for record in catalog:
        if len(results) >= limit:
            break
        fields = matching_fields(record, normalized)
        if not fields:
            continue
        results.append(
            MatchResult(
                record=record,
                matched_fields=fields,
                highlight_ranges=highlight_label(record.label, query or ""),
            )
        )
    return results


# ---------------------------------------------------------------------------
# Highlighting
# ---------------------------------------------------------------------------


def _fold_char(ch: str) -> str:
    """
    Case- and accent-fold a single character to a single character, so that
    indices in the folded string line up with the original.
    """
    mapped = _DEBURR_LETTERS.get(ch)
    if mapped is not None and len(mapped) == 1:
        return mapped.lower()
    base = "".join(c for c in unicodedata.normalize("NFD", ch) if not unicodedata.combining(c))
    lowered = (base or ch).lower()
    if len(lowered) == 1:
        return lowered
    lowered = ch.lower()
    return lowered if len(lowered) == 1 else ch


def _fold(value: str) -> str:
    return "".join(_fold_char(ch) for ch in value)


def find_match_ranges(text: str, query: str) -> List[Tuple[int, int]]:
    """
    Locate every occurrence of each whitespace-separated query word in
    ``text``, ignoring case and accents. Overlapping or touching ranges are
    merged; the result is sorted and non-overlapping.
    """
    folded_text = _fold(text)
    ranges: List[Tuple[int, int]] = []

    for word in query.split():
        folded_word = _fold(word)
        start = folded_text.find(folded_word)
        while start != -1:
            end = start + len(folded_word)
            ranges.append((start, end))
            start = folded_text.find(folded_word, end)

    ranges.sort()
    merged: List[Tuple[int, int]] = []
    for start, end in ranges:
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def split_ranges(text: str, matches: Sequence[Tuple[int, int]]) -> List[HighlightRange]:
    """
    Partition ``text`` into contiguous runs tagged highlighted or not.
    Concatenating the runs' text gives back ``text`` exactly.
    """
    parts: List[HighlightRange] = []
    cursor = 0
    for start, end in matches:
        if start > cursor:
            parts.append(HighlightRange(start=cursor, end=start, highlighted=False, text=text[cursor:start]))
        parts.append(HighlightRange(start=start, end=end, highlighted=True, text=text[start:end]))
        cursor = end
    if cursor < len(text) or not parts:
        parts.append(HighlightRange(start=cursor, end=len(text), highlighted=False, text=text[cursor:]))
    return parts


def highlight_label(label: str, query: str) -> List[HighlightRange]:
    """Compute the rendering runs of ``label`` for a suggestion list."""
    return split_ranges(label, find_match_ranges(label, query))
