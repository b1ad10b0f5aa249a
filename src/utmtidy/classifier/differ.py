"""Classified diff between an original and a cleaned URL.

Every difference becomes a Patch of one of three kinds:
- SAFE: formatting change that is mechanically reversible
- SEMANTIC: content changed; a human should approve it
- ERROR: structural inconsistency (duplicate count changed)
"""

from typing import Optional

from utmtidy.core.constants import PatchKind, WHITESPACE_RUN_PATTERN
from utmtidy.core.models import ParsedUrl, Patch, RulesetConfig


def _group_values(parsed: ParsedUrl) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for param in parsed.utm_params:
        grouped.setdefault(param.key, []).append(param.value)
    return grouped


def classify_change(before: str, after: str) -> PatchKind:
    """Classify a single value change.

    Args:
        before: Original value
        after: Cleaned value

    Returns:
        SAFE for case, trim or whitespace-to-underscore normalization,
        SEMANTIC otherwise
    """
    if before.lower() == after.lower():
        return PatchKind.SAFE

    if before.strip() != before and after == before.strip():
        return PatchKind.SAFE

    underscored = WHITESPACE_RUN_PATTERN.sub("_", before.strip())
    if underscored == after or underscored.lower() == after.lower():
        return PatchKind.SAFE

    return PatchKind.SEMANTIC


def describe_change(kind: PatchKind, key: str, before: str, after: str) -> str:
    """Human-readable description naming the rule that matched."""
    change = f'"{before}" -> "{after}"'
    if kind == PatchKind.SAFE:
        if before.lower() == after.lower():
            return f'Case normalized for "{key}": {change}'
        if before.strip() != before:
            return f'Trimmed whitespace for "{key}": {change}'
        if WHITESPACE_RUN_PATTERN.search(before):
            return f'Spaces replaced with underscores for "{key}": {change}'
        return f'Safe formatting change for "{key}": {change}'

    if kind == PatchKind.ERROR:
        return f'Error: conflicting change for "{key}": {change}'

    return f'Value changed for "{key}": {change}'


class DiffClassifier:
    """Compare original and cleaned URLs and classify each difference."""

    def __init__(self, ruleset: RulesetConfig):
        self.ruleset = ruleset

    def diff(self, original: ParsedUrl, cleaned: ParsedUrl, row_index: int = 0) -> list[Patch]:
        """Diff two parsed URLs.

        Args:
            original: URL as parsed from input
            cleaned: Normalized URL
            row_index: Row position reported on each patch

        Returns:
            Patches in order: per-key value changes, pathname, fragment,
            parameter order. Empty when either side failed to parse or
            both sides are identical.
        """
        if original.parse_error or cleaned.parse_error:
            return []

        patches = self._diff_params(original, cleaned, row_index)

        pathname_patch = self._diff_pathname(original, cleaned, row_index)
        if pathname_patch:
            patches.append(pathname_patch)

        fragment_patch = self._diff_fragment(original, cleaned, row_index)
        if fragment_patch:
            patches.append(fragment_patch)

        order_patch = self._diff_order(original, cleaned, row_index)
        if order_patch:
            patches.append(order_patch)

        return patches

    def _diff_params(self, original: ParsedUrl, cleaned: ParsedUrl, row_index: int) -> list[Patch]:
        original_map = _group_values(original)
        cleaned_map = _group_values(cleaned)

        # Keys in first-seen order, original side first
        all_keys = list(dict.fromkeys([*original_map, *cleaned_map]))
        patches = []

        for key in all_keys:
            before_values = original_map.get(key, [])
            after_values = cleaned_map.get(key, [])

            if not before_values:
                patches.append(Patch(
                    row_index, key, PatchKind.SEMANTIC, "", after_values[0],
                    f'Parameter "{key}" was added',
                ))
                continue

            if not after_values:
                patches.append(Patch(
                    row_index, key, PatchKind.SEMANTIC, ", ".join(before_values), "",
                    f'Parameter "{key}" was removed',
                ))
                continue

            if len(before_values) != len(after_values):
                patches.append(Patch(
                    row_index, key, PatchKind.ERROR,
                    ", ".join(before_values), ", ".join(after_values),
                    f'Duplicate count changed for "{key}": {len(before_values)} -> {len(after_values)}',
                ))
                continue

            for before, after in zip(sorted(before_values), sorted(after_values)):
                if before == after:
                    continue
                kind = classify_change(before, after)
                patches.append(Patch(
                    row_index, key, kind, before, after,
                    describe_change(kind, key, before, after),
                ))

        return patches

    def _diff_pathname(self, original: ParsedUrl, cleaned: ParsedUrl, row_index: int) -> Optional[Patch]:
        if original.pathname == cleaned.pathname:
            return None

        if original.pathname.rstrip("/") == cleaned.pathname:
            return Patch(
                row_index, "pathname", PatchKind.SAFE, original.pathname, cleaned.pathname,
                "Removed trailing slash from pathname",
            )
        return Patch(
            row_index, "pathname", PatchKind.SEMANTIC, original.pathname, cleaned.pathname,
            f'Pathname changed from "{original.pathname}" to "{cleaned.pathname}"',
        )

    def _diff_fragment(self, original: ParsedUrl, cleaned: ParsedUrl, row_index: int) -> Optional[Patch]:
        if original.fragment == cleaned.fragment:
            return None

        kind = PatchKind.SAFE if self.ruleset.strip_fragment else PatchKind.SEMANTIC
        if original.fragment and not cleaned.fragment:
            description = "Fragment stripped"
        else:
            description = f'Fragment changed from "{original.fragment}" to "{cleaned.fragment}"'
        return Patch(row_index, "fragment", kind, original.fragment, cleaned.fragment, description)

    def _diff_order(self, original: ParsedUrl, cleaned: ParsedUrl, row_index: int) -> Optional[Patch]:
        original_keys = original.utm_keys()
        cleaned_keys = cleaned.utm_keys()

        if original_keys == cleaned_keys or set(original_keys) != set(cleaned_keys):
            return None

        return Patch(
            row_index, "param_order", PatchKind.SAFE,
            ",".join(original_keys), ",".join(cleaned_keys),
            "Parameters reordered to canonical order",
        )


def diff_rows(
    original: ParsedUrl,
    cleaned: ParsedUrl,
    ruleset: RulesetConfig,
    row_index: int = 0,
) -> list[Patch]:
    """Diff an original URL against its cleaned form."""
    return DiffClassifier(ruleset).diff(original, cleaned, row_index)
