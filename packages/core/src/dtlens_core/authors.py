"""Map definition-header authors to GitHub handles for review pings.

Resolution runs an ordered list of strategies; the first one that returns
handles wins. Adding a new source of handles means adding a strategy, not
another branch in the resolver.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from dtlens_core.header import Author

# Contributors whose header URL is not a GitHub profile.
KNOWN_AUTHORS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "https://asana.com": ("@pspeter3", "@vsiao"),
        "http://phyzkit.net/": ("@kontan",),
        "http://ianobermiller.com": ("@ianobermiller",),
    }
)

_GITHUB_PROFILE_RE = re.compile(r"^https?://github\.com/([^/]+)/?$")


class AuthorStrategy(ABC):
    @abstractmethod
    def try_resolve(self, author: Author) -> tuple[str, ...] | None:
        """Return the handles for ``author``, or None if this strategy has no answer."""


class KnownAuthorTable(AuthorStrategy):
    """Exact URL lookup in a fixed table. One URL may map to several handles."""

    def __init__(self, table: Mapping[str, Iterable[str]] = KNOWN_AUTHORS):
        self._table = MappingProxyType({url: tuple(handles) for url, handles in table.items()})

    @property
    def table(self) -> Mapping[str, tuple[str, ...]]:
        return self._table

    def try_resolve(self, author: Author) -> tuple[str, ...] | None:
        # An empty entry has no answer; later strategies still get a turn.
        return self._table.get(author.url) or None


class GithubProfilePattern(AuthorStrategy):
    """``https://github.com/<name>`` (optional trailing slash) → ``@<name>``."""

    def try_resolve(self, author: Author) -> tuple[str, ...] | None:
        match = _GITHUB_PROFILE_RE.match(author.url or "")
        if not match:
            return None
        return (f"@{match.group(1)}",)


class AuthorResolver:
    def __init__(self, strategies: Iterable[AuthorStrategy] | None = None):
        if strategies is None:
            strategies = (KnownAuthorTable(), GithubProfilePattern())
        self.strategies = tuple(strategies)

    def resolve(self, author: Author) -> tuple[str, ...] | None:
        for strategy in self.strategies:
            handles = strategy.try_resolve(author)
            if handles is not None:
                return handles
        return None


def build_resolver(config: dict | None = None) -> AuthorResolver:
    """Build a resolver whose known-author table includes ``config["known_authors"]``.

    Configured entries override built-in ones for the same URL.
    """
    extra = (config or {}).get("known_authors") or {}
    table = {**KNOWN_AUTHORS, **{url: tuple(handles) for url, handles in extra.items()}}
    return AuthorResolver((KnownAuthorTable(table), GithubProfilePattern()))


DEFAULT_RESOLVER = AuthorResolver()
