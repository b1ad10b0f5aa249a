"""Parsing of single raw URLs into ParsedUrl values.

Parse failures are not raised: they come back as a ParsedUrl whose
``parse_error`` is set and whose structural fields are empty, so a single
bad row never interrupts a batch.
"""

from urllib.parse import parse_qsl, urlsplit

from utmtidy.core.constants import UTM_KEY_PATTERN
from utmtidy.core.models import ParsedUrl, UtmParam

EMPTY_URL_ERROR = "Empty URL"
MALFORMED_URL_ERROR = "Malformed URL: unable to parse"

# Schemes that must carry a host
SPECIAL_SCHEMES = {"http", "https", "ws", "wss", "ftp"}

# Tabs and newlines inside a URL are dropped before parsing
_STRIP_CHARS = str.maketrans("", "", "\t\n\r")


def parse_url_row(raw_url: str) -> ParsedUrl:
    """Parse one raw string into a ParsedUrl.

    Args:
        raw_url: URL text, possibly with surrounding whitespace

    Returns:
        ParsedUrl; ``parse_error`` is "Empty URL" for blank input and
        "Malformed URL: unable to parse" when the text is not a URL
    """
    trimmed = raw_url.strip()

    if not trimmed:
        return ParsedUrl(raw=trimmed, parse_error=EMPTY_URL_ERROR)

    try:
        parts = urlsplit(trimmed.translate(_STRIP_CHARS))
        # Accessing port validates it
        parts.port
    except ValueError:
        return ParsedUrl(raw=trimmed, parse_error=MALFORMED_URL_ERROR)

    scheme = parts.scheme.lower()
    host = parts.hostname or ""
    if not scheme or (scheme in SPECIAL_SCHEMES and not host):
        return ParsedUrl(raw=trimmed, parse_error=MALFORMED_URL_ERROR)

    if ":" in host:
        host = f"[{host}]"

    pathname = parts.path
    if scheme in SPECIAL_SCHEMES and not pathname:
        pathname = "/"

    utm_params: list[UtmParam] = []
    other_params: dict[str, str] = {}
    key_counts: dict[str, int] = {}

    for raw_key, value in parse_qsl(parts.query, keep_blank_values=True):
        if UTM_KEY_PATTERN.match(raw_key):
            key = raw_key.lower()
            key_counts[key] = key_counts.get(key, 0) + 1
            utm_params.append(UtmParam(key=key, value=value, raw_key=raw_key))
        else:
            other_params[raw_key] = value

    duplicate_keys = [key for key, count in key_counts.items() if count > 1]

    return ParsedUrl(
        raw=trimmed,
        protocol=scheme,
        host=host,
        pathname=pathname,
        utm_params=utm_params,
        other_params=other_params,
        fragment=parts.fragment,
        duplicate_keys=duplicate_keys,
    )
