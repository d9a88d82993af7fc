"""Utility helpers for acrofill."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from rapidfuzz import fuzz

from .models import FieldValue

# Fuzzy matching threshold (0-100)
FUZZY_THRESHOLD = 70

_WHITESPACE = re.compile(r"\s+")
_PARENS = re.compile(r"[()]")
_DOUBLE_UNDERSCORE_SUFFIX = re.compile(r"__\d+$")
_DASH_SUFFIX = re.compile(r"-\d+$")


def normalize_name(name: str) -> str:
    """Canonical form of a template field name.

    Duplicated widgets are often named ``dni-paciente-2`` or ``edad__1``; both
    collapse to their base name.
    """
    cleaned = _WHITESPACE.sub("-", (name or "").lower().strip())
    cleaned = _PARENS.sub("", cleaned)
    cleaned = _DOUBLE_UNDERSCORE_SUFFIX.sub("", cleaned)
    return _DASH_SUFFIX.sub("", cleaned)


def canonical_index(
    names: Iterable[str],
    aliases: Optional[Mapping[str, Sequence[str]]] = None,
) -> Dict[str, List[str]]:
    """Group internal field names under their canonical name.

    Manual aliases win over normalisation for the internal names they list.
    """
    groups: Dict[str, set] = {}
    assigned: set = set()
    for canon, internals in (aliases or {}).items():
        groups.setdefault(canon, set()).update(internals)
        assigned.update(internals)
    for internal in names:
        if internal in assigned:
            continue
        groups.setdefault(normalize_name(internal), set()).add(internal)
    return {canon: sorted(groups[canon]) for canon in sorted(groups)}


def expand_canonical_payload(
    payload: Mapping[str, FieldValue],
    index: Mapping[str, Sequence[str]],
) -> Dict[str, FieldValue]:
    """Replicate each canonical value onto every internal name it stands for.

    Keys that are not canonical names are passed through unchanged.
    """
    expanded: Dict[str, FieldValue] = {}
    for name, value in payload.items():
        internals = index.get(name)
        if not internals:
            expanded[name] = value
            continue
        for internal in internals:
            expanded[internal] = value
    return expanded


def _similarity(query: str, candidate: str) -> float:
    query_l = query.lower()
    candidate_l = candidate.lower()
    # Average token_set and token_sort to balance partial matches against word presence
    score = (fuzz.token_set_ratio(query_l, candidate_l) + fuzz.token_sort_ratio(query_l, candidate_l)) / 2
    if normalize_name(query) == normalize_name(candidate):
        score = max(score, 95.0)
    return score


def suggest_field_names(
    missing: Iterable[str],
    available: Sequence[str],
    threshold: float = FUZZY_THRESHOLD,
) -> Dict[str, str]:
    """Suggest the closest template field for each missing payload name."""
    suggestions: Dict[str, str] = {}
    for name in missing:
        best_match: Optional[str] = None
        best_score = 0.0
        for candidate in available:
            score = _similarity(name.replace("-", " "), candidate.replace("-", " "))
            if score > best_score:
                best_score = score
                best_match = candidate
        if best_match is not None and best_score >= threshold:
            suggestions[name] = best_match
    return suggestions


__all__ = [
    "FUZZY_THRESHOLD",
    "canonical_index",
    "expand_canonical_payload",
    "normalize_name",
    "suggest_field_names",
]
