"""Helpers for raw header blocks and httpx header collections."""

from typing import Dict, List, Mapping, Optional

import httpx

CRLF = "\r\n"
SEPARATOR = ": "


def parse_header_block(raw: Optional[str]) -> Dict[str, Optional[str]]:
    """Parse a CRLF-delimited ``Name: Value`` header block.

    Each line is split on its first ``": "``. Lines with an empty name are
    skipped, a line without a separator maps its name to None. When a name
    occurs more than once the last occurrence wins. Names are matched
    case-sensitively.

    Args:
        raw: Header block as captured from the SOAP transport.

    Returns:
        Mapping of header name to value.
    """
    headers: Dict[str, Optional[str]] = {}
    if not raw:
        return headers

    for line in raw.split(CRLF):
        name, sep, value = line.partition(SEPARATOR)
        if not name:
            continue
        headers[name] = value if sep else None

    return headers


def render_header_block(headers: Mapping[str, str], start_line: Optional[str] = None) -> str:
    """Render headers as a CRLF-delimited block, optionally after a start line."""
    lines = [start_line] if start_line else []
    lines.extend(f"{name}{SEPARATOR}{value}" for name, value in headers.items())
    return CRLF.join(lines)


def headers_to_dict(headers: httpx.Headers) -> Dict[str, List[str]]:
    """Convert httpx headers to ``name -> [values]`` keeping the sent case."""
    result: Dict[str, List[str]] = {}
    index: Dict[str, str] = {}
    for raw_name, raw_value in headers.raw:
        name = raw_name.decode(headers.encoding)
        value = raw_value.decode(headers.encoding)
        key = index.setdefault(name.lower(), name)
        result.setdefault(key, []).append(value)
    return result
