"""Parser for the comment header at the top of a DefinitelyTyped definition file.

A well-formed header looks like::

    // Type definitions for jQuery 1.10
    // Project: http://jquery.com/
    // Definitions by: Boris Yankov <https://github.com/borisyankov>, Christian Hoffmeister <https://github.com/choffmeister>
    //                 Steve Fenton <https://github.com/Steve-Fenton>
    // Definitions: https://github.com/DefinitelyTyped/DefinitelyTyped

parse() never raises: malformed input yields a HeaderResult with
``success=False`` and a human-readable ``error``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_LABEL_RE = re.compile(r"^//\s*Type definitions for\s+(?P<label>.+?)\s*$")
_PROJECT_RE = re.compile(r"^//\s*Project:\s*(?P<urls>.+?)\s*$")
_AUTHORS_RE = re.compile(r"^//\s*Definitions by:\s*(?P<authors>.*?)\s*$")
_DEFINITIONS_RE = re.compile(r"^//\s*Definitions:\s*(?P<url>.+?)\s*$")
_CONTINUATION_RE = re.compile(r"^//\s+(?P<authors>[^\s:][^:]*<[^>]+>.*?)\s*$")
_AUTHOR_RE = re.compile(r"^(?P<name>[^<>]+?)\s*<(?P<url>[^<>\s]+)>$")
# "1.10", "2.x", "0.9.1" at the end of the label is a version, not part of the name.
_VERSION_SUFFIX_RE = re.compile(r"\s+v?[\d.x]+$")


@dataclass(frozen=True)
class Author:
    name: str
    url: str


@dataclass(frozen=True)
class Project:
    name: str
    url: str


@dataclass(frozen=True)
class HeaderResult:
    """Outcome of parsing one definition header."""

    success: bool
    label: str = ""
    project: tuple[Project, ...] = field(default_factory=tuple)
    authors: tuple[Author, ...] = field(default_factory=tuple)
    definitions_url: str | None = None
    error: str | None = None

    @classmethod
    def failure(cls, reason: str) -> HeaderResult:
        return cls(success=False, error=reason)


def _split_authors(raw: str) -> list[Author] | None:
    authors = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        match = _AUTHOR_RE.match(chunk)
        if not match:
            return None
        authors.append(Author(name=match.group("name").strip(), url=match.group("url")))
    return authors


def _header_lines(text: str) -> list[str]:
    """Return the leading run of comment lines, skipping a BOM and blank lines."""
    lines = []
    for line in text.lstrip("\ufeff").splitlines():
        stripped = line.strip()
        if not stripped and not lines:
            continue
        if not stripped.startswith("//"):
            break
        lines.append(stripped)
    return lines


def parse(text: str | None) -> HeaderResult:
    """Parse the definition header of ``text``."""
    if not text or not text.strip():
        return HeaderResult.failure("empty content")

    lines = _header_lines(text)
    if not lines:
        return HeaderResult.failure("no header comment found")

    label_match = _LABEL_RE.match(lines[0])
    if not label_match:
        return HeaderResult.failure("missing 'Type definitions for' line")
    label = label_match.group("label")
    project_name = _VERSION_SUFFIX_RE.sub("", label)

    projects: list[Project] = []
    authors: list[Author] | None = None
    definitions_url = None
    in_authors = False

    for line in lines[1:]:
        project_match = _PROJECT_RE.match(line)
        if project_match:
            in_authors = False
            urls = [u.strip() for u in project_match.group("urls").split(",") if u.strip()]
            projects.extend(Project(name=project_name, url=u) for u in urls)
            continue

        authors_match = _AUTHORS_RE.match(line)
        if authors_match:
            parsed = _split_authors(authors_match.group("authors"))
            if parsed is None:
                return HeaderResult.failure(f"malformed author entry: {authors_match.group('authors')!r}")
            authors = parsed
            in_authors = True
            continue

        definitions_match = _DEFINITIONS_RE.match(line)
        if definitions_match:
            in_authors = False
            definitions_url = definitions_match.group("url")
            continue

        if in_authors:
            continuation = _CONTINUATION_RE.match(line)
            if continuation:
                parsed = _split_authors(continuation.group("authors"))
                if parsed is None:
                    return HeaderResult.failure(f"malformed author entry: {continuation.group('authors')!r}")
                authors.extend(parsed)
                continue
            in_authors = False

    if not projects:
        return HeaderResult.failure("missing 'Project:' line")
    if authors is None:
        return HeaderResult.failure("missing 'Definitions by:' line")

    return HeaderResult(
        success=True,
        label=label,
        project=tuple(projects),
        authors=tuple(authors),
        definitions_url=definitions_url,
    )
