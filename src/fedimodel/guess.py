"""
Guess what a bare URL points at from its path shape.

Useful before anything is fetched: a link found in text can be classified as
an actor profile or a piece of content using the URL layouts of common server
software. Matching is case-insensitive and looks at the path only.

Examples
--------
>>> from fedimodel.guess import GuessedKind, guess_kind_from_url, extract_actor_handle_from_url
>>> guess_kind_from_url("https://mastodon.example/users/alice/statuses/110")
<GuessedKind.CONTENT: 'content'>
>>> str(extract_actor_handle_from_url("https://mastodon.example/users/alice"))
'@alice@mastodon.example'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final
from urllib.parse import urlsplit

__all__ = [
    "GuessedKind",
    "ActorHandle",
    "guess_kind_from_url",
    "extract_username_from_url",
    "extract_actor_handle_from_url",
]

_ACTOR_PATTERNS: Final[tuple[re.Pattern[str], ...]] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^/(users|u)/(?P<user>[^/]+)$",
        r"^/profile/(?P<user>[^/]+)$",
        r"^/ap/users/(?P<user>\d+)$",
    )
)

_CONTENT_PATTERNS: Final[tuple[re.Pattern[str], ...]] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^/users/[^/]+/statuses/\d+$",  # Mastodon
        r"^/notes/.+$",  # Misskey
        r"^/p/([^/]+)/\d+$",  # Pixelfed
        r"^/post/\d+$",  # Lemmy
        r"^/(notice|objects)/[^/]+$",  # Soapbox
        r"^/ap/users/\d+/post/\d+/?$",  # threads.net
    )
)


class GuessedKind(Enum):
    ACTOR = "actor"
    CONTENT = "content"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ActorHandle:
    """Account name plus the server it lives on."""

    server: str
    username: str

    def __str__(self) -> str:
        return f"@{self.username}@{self.server}"


def guess_kind_from_url(url: str) -> GuessedKind:
    """Classify `url` as an actor profile, content, or unknown."""
    path = urlsplit(url).path
    if not path:
        return GuessedKind.UNKNOWN
    if any(p.match(path) for p in _ACTOR_PATTERNS):
        return GuessedKind.ACTOR
    if any(p.match(path) for p in _CONTENT_PATTERNS):
        return GuessedKind.CONTENT
    return GuessedKind.UNKNOWN


def extract_username_from_url(url: str) -> str | None:
    """Username from an actor-profile URL, or None when the path is not one."""
    path = urlsplit(url).path
    if not path:
        return None
    for pattern in _ACTOR_PATTERNS:
        m = pattern.match(path)
        if m is not None and m.group("user"):
            return m.group("user")
    return None


def extract_actor_handle_from_url(url: str) -> ActorHandle | None:
    """
    Build an ActorHandle from an actor-profile URL.

    Returns:
        ActorHandle | None: None when the path is not an actor path or the URL has no host.
    """
    username = extract_username_from_url(url)
    if username is None:
        return None
    host = urlsplit(url).hostname
    if not host:
        return None
    return ActorHandle(server=host, username=username)
