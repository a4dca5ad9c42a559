"""
Rendering of nested validation-error trees.

The API reports invalid form bodies as a tree keyed by field name or list
index, with ``_errors`` lists at the leaves::

    {"embeds": {"0": {"title": {"_errors": [{"code": "...", "message": "..."}]}}}}
"""

import json
import re
from typing import Any, List, Mapping, Optional

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
SEPARATOR = "\n\t"


def _child_path(parent: Optional[str], key: Any) -> str:
    key = str(key)
    if parent is None:
        return key
    if _IDENTIFIER.fullmatch(key):
        return f"{parent}.{key}"
    if key.isdecimal() and key.isascii():
        return f"{parent}[{int(key)}]"
    return f"{parent}[{json.dumps(key)}]"


def _walk(tree: Mapping[str, Any], path: Optional[str], lines: List[str]) -> None:
    for key, value in tree.items():
        if key == "_errors":
            for error in value or []:
                lines.append(f"{error.get('code')} in {path or 'payload'} : {error.get('message')}")
        elif isinstance(value, Mapping):
            _walk(value, _child_path(path, key), lines)


def flatten_errors(tree: Mapping[str, Any]) -> str:
    """Flatten a validation-error tree into one line per leaf error."""
    lines: List[str] = []
    _walk(tree, None, lines)
    return SEPARATOR.join(lines)
