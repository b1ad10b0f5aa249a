"""Input shape detection for pasted text."""

from utmtidy.core.constants import DEFAULTS, InputMode, URL_PATTERN


def detect_input_mode(input_raw: str) -> InputMode:
    """Classify pasted text as a plain URL list or a tab-separated range.

    Lines containing a tab decide first; failing that, lines that look like
    URLs; any tab at all tips an undecided input towards TSV.

    Args:
        input_raw: Raw pasted text

    Returns:
        InputMode.TSV_RANGE or InputMode.URL_LIST
    """
    if not input_raw.strip():
        return InputMode.URL_LIST

    lines = [line for line in input_raw.strip().split("\n") if line.strip()]
    threshold = DEFAULTS["mode_ratio_threshold"]

    tab_count = sum(1 for line in lines if "\t" in line)
    if tab_count / len(lines) >= threshold:
        return InputMode.TSV_RANGE

    url_count = sum(1 for line in lines if URL_PATTERN.match(line.strip()))
    if url_count / len(lines) >= threshold:
        return InputMode.URL_LIST

    if tab_count > 0:
        return InputMode.TSV_RANGE

    return InputMode.URL_LIST
