"""Pull request data retrieval via PyGithub.

Everything the review engine needs is fetched up front in get_pr_info() so
the per-file review steps never touch the GitHub API.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from github import Github, GithubException

logger = logging.getLogger(__name__)

DEFINITION_FILE_RE = re.compile(r"\.d\.tsx?$")

_SHORT_REF_RE = re.compile(r"^(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)#(?P<number>\d+)$")
_PR_URL_RE = re.compile(r"^https?://github\.com/(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)/pull/(?P<number>\d+)/?")


@dataclass(frozen=True)
class ReviewRequest:
    """Identifies one pull request."""

    owner: str
    repo: str
    number: int

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return f"{self.full_name}#{self.number}"

    @classmethod
    def parse(cls, ref: str) -> ReviewRequest:
        """Build a request from ``owner/repo#123``."""
        match = _SHORT_REF_RE.match(ref.strip())
        if not match:
            raise ValueError(f"Invalid pull request reference: {ref!r}. Expected owner/repo#number.")
        return cls(match.group("owner"), match.group("repo"), int(match.group("number")))

    @classmethod
    def from_url(cls, url: str) -> ReviewRequest:
        """Build a request from a ``https://github.com/owner/repo/pull/123`` URL."""
        match = _PR_URL_RE.match(url.strip())
        if not match:
            raise ValueError(f"Invalid pull request URL: {url!r}")
        return cls(match.group("owner"), match.group("repo"), int(match.group("number")))


@dataclass(frozen=True)
class ChangedFile:
    filename: str
    status: str  # "added" | "modified" | "removed" | "renamed" | ...


@dataclass
class PRInfo:
    """A pull request's changed files plus the text of its definition files."""

    request: ReviewRequest
    files: list[ChangedFile] = field(default_factory=list)
    contents: dict[str, str] = field(default_factory=dict)  # head revision
    base_contents: dict[str, str] = field(default_factory=dict)  # pre-change revision


def is_definition_file(filename: str) -> bool:
    return DEFINITION_FILE_RE.search(filename) is not None


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_diff(pr):
    return pr.get_files()


def get_file_text(repo, path: str, ref: str) -> str:
    return repo.get_contents(path, ref=ref).decoded_content.decode("utf-8", errors="replace")


def get_pr_info(repo, request: ReviewRequest) -> PRInfo:
    """Fetch the file list and definition-file contents for one pull request.

    Head content is fetched for every definition file still present after the
    change; base content only for modified ones. Any API failure propagates.
    """
    try:
        pr = get_pull(repo, request.number)
    except GithubException:
        raise ValueError(f"PR #{request.number} not found in {request.full_name}.")

    head_sha = pr.head.sha
    base_sha = pr.base.sha
    info = PRInfo(request=request)

    for f in get_diff(pr):
        changed = ChangedFile(filename=f.filename, status=f.status)
        info.files.append(changed)
        if not is_definition_file(changed.filename):
            continue
        if changed.status != "removed":
            info.contents[changed.filename] = get_file_text(repo, changed.filename, head_sha)
        if changed.status == "modified":
            info.base_contents[changed.filename] = get_file_text(repo, changed.filename, base_sha)

    logger.debug(
        "Fetched %s: %d file(s), %d definition file(s)",
        request,
        len(info.files),
        len(info.contents),
    )
    return info
