"""URL reconstruction and plain URL-list export."""

from pathlib import Path
from urllib.parse import quote

from utmtidy.core.exceptions import ExportError
from utmtidy.core.models import ParsedUrl

# Characters left unescaped in query components
_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: str) -> str:
    """Percent-encode a query key or value."""
    return quote(value, safe=_COMPONENT_SAFE)


def reconstruct_url(parsed: ParsedUrl) -> str:
    """Rebuild a URL string from its parsed form.

    UTM params come first in stored order, then other params. A URL that
    failed to parse is returned as its raw text.

    Args:
        parsed: Parsed (usually cleaned) URL

    Returns:
        URL string
    """
    if parsed.parse_error:
        return parsed.raw

    url = f"{parsed.protocol}://{parsed.host}{parsed.pathname}"

    params = [f"{encode_component(p.key)}={encode_component(p.value)}" for p in parsed.utm_params]
    params.extend(
        f"{encode_component(key)}={encode_component(value)}"
        for key, value in parsed.other_params.items()
    )

    if params:
        url += "?" + "&".join(params)

    if parsed.fragment:
        url += f"#{parsed.fragment}"

    return url


def to_url_list(rows: list[ParsedUrl]) -> str:
    """One reconstructed URL per line."""
    return "\n".join(reconstruct_url(row) for row in rows)


class URLListExporter:
    """Export cleaned URLs as a newline-separated list."""

    def render(self, rows: list[ParsedUrl]) -> str:
        return to_url_list(rows)

    def export(self, rows: list[ParsedUrl], output_path: Path) -> None:
        """Write the URL list to a file.

        Raises:
            ExportError: If the file cannot be written
        """
        try:
            output_path.write_text(self.render(rows) + "\n", encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Failed to write URL list to {output_path}: {e}") from e
