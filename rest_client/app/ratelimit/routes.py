"""
Bucket key resolution for REST routes.
"""

import re

# Resources whose ids stay in the key: the API scopes limits per instance
MAJOR_RESOURCES = frozenset({"guilds", "channels", "webhooks"})

_REACTIONS = re.compile(r".*/reactions")
_RESOURCE_ID = re.compile(r"(?<![:A-Za-z])([A-Za-z]+)/(\d+)")
_MESSAGES_ROOT = re.compile(r"/channels/\d+/messages")


def _strip_minor_id(match: re.Match) -> str:
    resource = match.group(1)
    if resource in MAJOR_RESOURCES:
        return match.group(0)
    return f"{resource}/:id"


def resolve_bucket(method: str, path: str) -> str:
    """Derive the rate-limit bucket key for a request.

    Every emoji under a message's reactions collapses into one bucket, ids
    of minor resources are replaced by ``:id``, and deletes on a channel's
    message collection get their own bucket.
    """
    if "reactions" in path:
        match = _REACTIONS.match(path)
        if match:
            path = match.group(0)

    path = _RESOURCE_ID.sub(_strip_minor_id, path)

    if method == "DELETE" and _MESSAGES_ROOT.fullmatch(path):
        path = method + path

    return path
