from __future__ import annotations
import re
from typing import List, Optional
from urllib.parse import urlsplit, urlunsplit

# ========================================
#           INPUT PARSING HELPERS
# ========================================
"""
Helpers used by the selector and the create flow to turn what the user typed
into values the service understands.
"""

_WHITESPACE_RE = re.compile(r'\s+')
_INDEX_RE = re.compile(r'^[0-9]+$')


def parse_peer_ids(text: str) -> List[str]:
    """
    Turns a comma separated list of peer ids into a list.

    - All whitespace is removed, not only around the commas.
    - Order and duplicates are kept as typed.
    - Empty segments ("a,,b" or a trailing comma) are dropped.
    """
    compact = _WHITESPACE_RE.sub('', text)
    return [p for p in compact.split(',') if p]


def parse_index(text: str, size: int) -> Optional[int]:
    """
    Returns the list index the user typed, or None.

    Only plain decimal digits are accepted and the value must satisfy
    0 <= index < size.
    """
    text = text.strip()
    if not _INDEX_RE.fullmatch(text):
        return None
    idx = int(text)
    if 0 <= idx < size:
        return idx
    return None


# ========================================
#           URL HELPERS
# ========================================

def normalize_host(host: str) -> str:
    """Accepts 'example.com' or 'http://example.com/' and returns 'http://example.com'."""
    host = host.strip().rstrip('/')
    if '://' not in host:
        host = f"http://{host}"
    return host


def http_to_ws(url: str) -> str:
    """
    Maps an http(s) base url onto the matching ws(s) url.

    Examples: "http://localhost:3030" -> "ws://localhost:3030",
              "https://chat.example:443" -> "wss://chat.example:443"
    """
    parts = urlsplit(url)
    scheme = {'http': 'ws', 'https': 'wss'}.get(parts.scheme, parts.scheme)
    return urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))
