"""Tests for author → reviewer handle resolution."""

import pytest

from dtlens_core.authors import (
    DEFAULT_RESOLVER,
    KNOWN_AUTHORS,
    AuthorResolver,
    GithubProfilePattern,
    KnownAuthorTable,
    build_resolver,
)
from dtlens_core.header import Author


def author(url, name="Someone"):
    return Author(name=name, url=url)


class TestKnownAuthorTable:
    def test_organisation_maps_to_several_handles(self):
        assert KnownAuthorTable().try_resolve(author("https://asana.com")) == ("@pspeter3", "@vsiao")

    def test_lookup_is_exact(self):
        assert KnownAuthorTable().try_resolve(author("https://asana.com/")) is None
        assert KnownAuthorTable().try_resolve(author("http://phyzkit.net")) is None

    def test_empty_entry_has_no_answer(self):
        table = KnownAuthorTable({"https://github.com/jane": []})
        assert table.try_resolve(author("https://github.com/jane")) is None

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            KNOWN_AUTHORS["https://evil.example"] = ("@evil",)
        with pytest.raises(TypeError):
            KnownAuthorTable().table["https://evil.example"] = ("@evil",)


class TestGithubProfilePattern:
    @pytest.mark.parametrize(
        "url",
        ["https://github.com/octocat", "https://github.com/octocat/", "http://github.com/octocat"],
    )
    def test_profile_url_yields_handle(self, url):
        assert GithubProfilePattern().try_resolve(author(url)) == ("@octocat",)

    def test_name_case_preserved(self):
        assert GithubProfilePattern().try_resolve(author("https://github.com/Steve-Fenton")) == ("@Steve-Fenton",)

    @pytest.mark.parametrize(
        "url",
        ["https://gitlab.com/octocat", "https://github.com/", "https://github.com/octocat/repo", ""],
    )
    def test_non_profile_urls_rejected(self, url):
        assert GithubProfilePattern().try_resolve(author(url)) is None


class TestAuthorResolver:
    def test_table_wins_over_pattern(self):
        resolver = AuthorResolver(
            [KnownAuthorTable({"https://github.com/octocat": ["@the-real-octocat"]}), GithubProfilePattern()]
        )
        assert resolver.resolve(author("https://github.com/octocat")) == ("@the-real-octocat",)

    def test_falls_through_to_pattern(self):
        assert DEFAULT_RESOLVER.resolve(author("https://github.com/octocat")) == ("@octocat",)

    def test_unresolvable_returns_none(self):
        assert DEFAULT_RESOLVER.resolve(author("http://example.com")) is None

    def test_no_strategies_resolves_nothing(self):
        assert AuthorResolver([]).resolve(author("https://github.com/octocat")) is None


class TestBuildResolver:
    def test_empty_configured_entry_falls_through_to_pattern(self):
        resolver = build_resolver({"known_authors": {"https://github.com/jane": []}})
        assert resolver.resolve(author("https://github.com/jane")) == ("@jane",)

    def test_configured_entries_added(self):
        resolver = build_resolver({"known_authors": {"http://example.com": ["@a", "@b"]}})
        assert resolver.resolve(author("http://example.com")) == ("@a", "@b")
        assert resolver.resolve(author("http://ianobermiller.com")) == ("@ianobermiller",)

    def test_configured_entries_override_builtin(self):
        resolver = build_resolver({"known_authors": {"https://asana.com": ["@someone-else"]}})
        assert resolver.resolve(author("https://asana.com")) == ("@someone-else",)

    def test_missing_config_uses_builtin_table(self):
        assert build_resolver(None).resolve(author("http://phyzkit.net/")) == ("@kontan",)
