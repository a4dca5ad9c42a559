"""
multipart/form-data encoding for requests that carry attachments.
"""

import secrets
from typing import List, Optional, Sequence, Tuple, Union

CRLF = b"\r\n"
PAYLOAD_FIELD = "payload_json"

FileContent = Union[bytes, str]
Attachment = Tuple[str, FileContent]


def _as_bytes(content: FileContent) -> bytes:
    return content.encode("utf-8") if isinstance(content, str) else content


def choose_boundary(parts: Sequence[bytes], candidate: Optional[str] = None) -> str:
    """Pick a boundary that occurs in none of the given parts.

    The candidate grows by one random hex digit per collision.
    """
    boundary = candidate or secrets.token_hex(8)
    while any(boundary.encode("ascii") in part for part in parts):
        boundary += secrets.choice("0123456789abcdef")
    return boundary


def _quote(filename: str) -> str:
    return '"' + filename.replace("\\", "\\\\").replace('"', '\\"') + '"'


def encode_multipart(payload_json: str, files: Sequence[Attachment],
                     boundary: Optional[str] = None) -> Tuple[bytes, str]:
    """Build a multipart body from a JSON document plus attachments.

    Returns the body and the boundary for the Content-Type header. Files are
    sent as ``file1`` .. ``fileN`` in the order given.
    """
    payload = payload_json.encode("utf-8")
    contents = [_as_bytes(content) for _, content in files]
    boundary = choose_boundary([payload, *contents], boundary)
    delimiter = b"--" + boundary.encode("ascii")

    lines: List[bytes] = [
        delimiter,
        f'Content-Disposition: form-data; name="{PAYLOAD_FIELD}"'.encode("ascii"),
        b"Content-Type: application/json",
        b"",
        payload,
    ]
    for index, ((filename, _), content) in enumerate(zip(files, contents), start=1):
        lines.extend([
            delimiter,
            f'Content-Disposition: form-data; name="file{index}"; filename={_quote(filename)}'.encode("utf-8"),
            b"Content-Type: application/octet-stream",
            b"",
            content,
        ])
    lines.append(delimiter + b"--")

    return CRLF.join(lines), boundary
