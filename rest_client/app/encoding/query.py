"""
Query string encoding.
"""

from typing import Any, Iterable, Mapping, Optional, Tuple, Union

QueryParams = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def urlencode(value: Any) -> str:
    """Percent-encode every byte that is not an ASCII letter or digit."""
    return "".join(
        chr(byte) if chr(byte).isalnum() and byte < 0x80 else f"%{byte:02X}"
        for byte in _to_text(value).encode("utf-8")
    )


def build_url(base: str, query: Optional[QueryParams] = None) -> str:
    """Append ``?k=v&k2=v2`` to base, preserving the parameter order given."""
    if not query:
        return base
    items = query.items() if isinstance(query, Mapping) else query
    pairs = [f"{urlencode(key)}={urlencode(value)}" for key, value in items]
    if not pairs:
        return base
    return f"{base}?{'&'.join(pairs)}"
