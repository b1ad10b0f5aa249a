"""Fuzzy-matched corrections for UTM values against allow-lists."""

from typing import Optional, Sequence

from rapidfuzz.distance import Levenshtein

from utmtidy.core.constants import ALLOW_LIST_FIELDS, PatchKind
from utmtidy.core.models import ParsedUrl, Patch, RulesetConfig
from utmtidy.core.utils import clamp_for_fuzzy


def find_closest_match(value: str, allowed: Sequence[str]) -> Optional[str]:
    """Find the allow-list entry nearest to a value.

    Matching is case-insensitive. An exact match means no suggestion is
    needed. Otherwise the first entry at minimum edit distance wins,
    provided the distance is within max(2, len(value) // 3).

    Args:
        value: Observed UTM value
        allowed: Allow-list entries in priority order

    Returns:
        The suggested entry, or None
    """
    lower = value.lower()
    if any(a.lower() == lower for a in allowed):
        return None

    needle = clamp_for_fuzzy(lower)
    limit = max(2, len(lower) // 3)
    best_match: Optional[str] = None
    best_distance = limit + 1

    for candidate in allowed:
        distance = Levenshtein.distance(needle, clamp_for_fuzzy(candidate.lower()))
        if distance < best_distance:
            best_distance = distance
            best_match = candidate

    return best_match


def suggest_semantic_fixes(
    parsed: ParsedUrl,
    ruleset: RulesetConfig,
    row_index: int = 0,
) -> list[Patch]:
    """Propose allow-list corrections for source, medium and campaign.

    Suggestions are produced whatever the strict mode; only keys with a
    non-empty allow-list are considered.

    Args:
        parsed: URL whose UTM values are checked
        ruleset: Ruleset providing the allow-lists
        row_index: Row position reported on each patch

    Returns:
        SEMANTIC patches, one per parameter with a qualifying candidate
    """
    if parsed.parse_error:
        return []

    patches = []
    for key in ALLOW_LIST_FIELDS:
        allowed = ruleset.allow_list_for(key)
        if not allowed:
            continue
        for param in parsed.utm_params:
            if param.key != key:
                continue
            match = find_closest_match(param.value, allowed)
            if match is None or match.lower() == param.value.lower():
                continue
            patches.append(Patch(
                row_index=row_index,
                field=key,
                kind=PatchKind.SEMANTIC,
                before=param.value,
                after=match,
                description=f'Suggest changing {key} from "{param.value}" to allowed value "{match}"',
            ))
    return patches
