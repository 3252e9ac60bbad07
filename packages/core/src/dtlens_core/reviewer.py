"""Core review orchestration: classify changed definition files and build checklist comments."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

import httpx
from rich.console import Console

from dtlens_core import header
from dtlens_core.authors import DEFAULT_RESOLVER, AuthorResolver, build_resolver
from dtlens_core.gh.pull_request import ChangedFile, PRInfo, ReviewRequest, get_pr_info, get_repo, is_definition_file
from dtlens_core.header import Author, HeaderResult
from dtlens_core.registry import NPM_REGISTRY, RegistryClient, homepage_of

console = Console()
logger = logging.getLogger(__name__)

NAMING_GUIDE_URL = "http://definitelytyped.org/guides/contributing.html#naming-the-file"
TESTS_GUIDE_URL = "http://definitelytyped.org/guides/contributing.html#tests"
PARSE_FAILURE_MESSAGE = "can't parse definition header..."
CI_CHECK_LINE = "* [ ] pass the Travis CI test?"


@dataclass
class ReviewResult:
    """Review state for one changed definition file.

    Populated by exactly one of process_added / process_modified / the
    unknown-status branch; ``message`` is set last and never changes after.
    """

    parent: PRInfo
    file: ChangedFile
    base_header: HeaderResult | None = None
    author_accounts: list[str] = field(default_factory=list)
    unknown_authors: list[Author] = field(default_factory=list)
    message: str | None = None

    def render(self) -> str:
        return "\n".join([f"*{self.file.filename}*", "", self.message or ""])


def _checkbox(checked: bool) -> str:
    return "[X]" if checked else "[ ]"


def _join_lines(lines: list[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def package_name_of(filename: str) -> str:
    """The package directory: everything before the first ``/``."""
    idx = filename.find("/")
    return filename[:idx] if idx != -1 else ""


def candidate_test_files(filename: str) -> list[str]:
    """``foo/bar.d.ts`` → ``["foo/bar-tests.ts", "foo/bar-tests.tsx"]``."""
    base = filename[:-5] + "-tests.ts"
    return [base, base + "x"]


async def _lookup_homepage(registry: RegistryClient, package_name: str) -> tuple[bool, str | None]:
    """Return (lookup_succeeded, homepage). Registry errors count as "not found"."""
    try:
        document = await registry.info(package_name)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Registry lookup for %r failed, treating as unpublished: %s", package_name, e)
        return False, None
    if document is None:
        return False, None
    return True, homepage_of(document)


async def process_added(result: ReviewResult, registry: RegistryClient) -> ReviewResult:
    info = result.parent
    filename = result.file.filename

    package_name = package_name_of(filename)
    test_files = candidate_test_files(filename)
    changed_names = {f.filename for f in info.files}
    test_file_exists = any(name in changed_names for name in test_files)

    parsed = header.parse(info.contents.get(filename))
    if parsed.success:
        result.base_header = parsed
    else:
        logger.debug("%s: header not parsed (%s)", filename, parsed.error)

    found, homepage = await _lookup_homepage(registry, package_name)
    project_url = result.base_header.project[0].url if result.base_header and result.base_header.project else None
    published = found and project_url is not None and homepage == project_url

    lines = [
        "Checklist",
        "",
        f"* {_checkbox(published)} is correct [naming convention]({NAMING_GUIDE_URL})?",
    ]
    if published:
        lines.append(f"  * https://www.npmjs.com/package/{package_name} - {homepage}")
    else:
        lines.append(f"  * https://www.npmjs.com/package/{package_name}")
        lines.append(f"  * http://bower.io/search/?q={package_name}")
        lines.append("  * others?")
    lines.append(
        f"* {_checkbox(test_file_exists)} has a [test file]({TESTS_GUIDE_URL})? ({' or '.join(test_files)})"
    )
    lines.append(CI_CHECK_LINE)

    result.message = _join_lines(lines)
    return result


def process_modified(result: ReviewResult, resolver: AuthorResolver = DEFAULT_RESOLVER) -> ReviewResult:
    filename = result.file.filename

    parsed = header.parse(result.parent.base_contents.get(filename))
    if not parsed.success:
        logger.debug("%s: base header not parsed (%s)", filename, parsed.error)
        result.message = PARSE_FAILURE_MESSAGE
        return result
    result.base_header = parsed

    for author in parsed.authors:
        handles = resolver.resolve(author)
        if handles:
            result.author_accounts.extend(handles)
        elif author not in result.unknown_authors:
            result.unknown_authors.append(author)

    mentions = list(result.author_accounts)
    mentions.extend(f"{author.name} (account can't be detected)" for author in result.unknown_authors)

    lines = []
    if mentions:
        noun = "author" if len(mentions) == 1 else "authors"
        lines.append(f"to {noun} ({' '.join(mentions)}). Could you review this PR?")
        lines.append(":+1: or :-1:?")
    lines.extend(["", "Checklist", "", CI_CHECK_LINE])

    result.message = _join_lines(lines)
    return result


async def classify_file(
    info: PRInfo,
    file: ChangedFile,
    registry: RegistryClient,
    resolver: AuthorResolver = DEFAULT_RESOLVER,
) -> ReviewResult:
    result = ReviewResult(parent=info, file=file)
    if file.status == "added":
        return await process_added(result, registry)
    if file.status == "modified":
        return process_modified(result, resolver)
    result.message = f"unknown status: {file.status}"
    return result


async def review_pr_info(
    info: PRInfo,
    registry: RegistryClient,
    resolver: AuthorResolver = DEFAULT_RESOLVER,
) -> list[ReviewResult]:
    """Review every definition file in ``info`` concurrently, keeping file order."""
    definition_files = [f for f in info.files if is_definition_file(f.filename)]
    # gather() returns results positionally, so completion order doesn't matter.
    return list(await asyncio.gather(*(classify_file(info, f, registry, resolver) for f in definition_files)))


async def construct_review_results(
    repo,
    request: ReviewRequest,
    registry: RegistryClient,
    resolver: AuthorResolver = DEFAULT_RESOLVER,
) -> list[ReviewResult]:
    info = await asyncio.to_thread(get_pr_info, repo, request)
    return await review_pr_info(info, registry, resolver)


async def generate_comments(
    repo,
    request: ReviewRequest,
    registry: RegistryClient,
    resolver: AuthorResolver = DEFAULT_RESOLVER,
) -> list[str]:
    results = await construct_review_results(repo, request, registry, resolver)
    return [r.render() for r in results]


async def _run(repo, request: ReviewRequest, config: dict) -> list[str]:
    resolver = build_resolver(config)
    async with RegistryClient(
        base_url=config.get("registry_url", NPM_REGISTRY),
        timeout=config.get("registry_timeout", 10.0),
    ) as registry:
        return await generate_comments(repo, request, registry, resolver)


def run_review(request: ReviewRequest, config: dict, repo_obj=None) -> list[str]:
    """Fetch ``request`` from GitHub and return one rendered comment per definition file.

    Errors fetching the pull request propagate; nothing is returned partially.
    """
    this_repo = repo_obj if repo_obj is not None else get_repo(request.full_name, token=config["github_token"])
    comments = asyncio.run(_run(this_repo, request, config))
    console.print(f"[dim]{request}: {len(comments)} definition file(s) reviewed.[/dim]")
    return comments
