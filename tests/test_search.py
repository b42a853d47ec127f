"""Tests for command search"""

import pytest

from search import filter_entries, namespaces
from trove import CommandEntry


class TestFilterEntries:
    """Test cases for filter_entries"""

    def test_empty_query_returns_namespace_in_order(self, sample_entries):
        """Test that no query lists the whole namespace in trove order"""
        result = filter_entries(sample_entries, "default", "")

        assert [e.name for e in result] == ["ssh-prod", "grep-logs", "list"]

    def test_other_namespaces_are_excluded(self, sample_entries):
        result = filter_entries(sample_entries, "docker", "")

        assert [e.name for e in result] == ["docker-ps"]

    def test_unknown_namespace_is_empty(self, sample_entries):
        assert filter_entries(sample_entries, "nope", "") == []

    @pytest.mark.parametrize("query,expected", [
        ("LIST", ["list"]),           # name, case-insensitive
        ("remote", ["ssh-prod"]),     # tag
        ("details", ["list"]),        # description
        ("containers", []),           # other namespace only
        ("prod.example", []),         # command text is not searched
    ])
    def test_matching_fields(self, sample_entries, query, expected):
        """Test that name, tags and description are searched"""
        assert [e.name for e in filter_entries(sample_entries, "default", query)] == expected

    def test_name_prefix_matches_come_first(self, sample_entries):
        """Test that names starting with the query outrank other matches"""
        result = filter_entries(sample_entries, "default", "ssh")

        # grep-logs matches through its description only
        assert [e.name for e in result] == ["ssh-prod", "grep-logs"]

    def test_ties_keep_trove_order(self):
        """Test that the ordering is stable within each tier"""
        entries = [
            CommandEntry(name="b-git", namespace="ns", description="git thing"),
            CommandEntry(name="git-log", namespace="ns"),
            CommandEntry(name="a-git", namespace="ns"),
            CommandEntry(name="git-diff", namespace="ns"),
        ]

        result = filter_entries(entries, "ns", "git")

        assert [e.name for e in result] == ["git-log", "git-diff", "b-git", "a-git"]

    def test_every_match_contains_query(self, sample_entries):
        """Test that each returned entry really contains the query"""
        for query in ["s", "LOG", "e", "x"]:
            for entry in filter_entries(sample_entries, "default", query):
                haystacks = [entry.name, entry.description] + entry.tags
                assert any(query.lower() in h.lower() for h in haystacks)


class TestNamespaces:
    """Test cases for the namespace tab list"""

    def test_default_namespace_first(self, sample_entries):
        entries = sample_entries[3:] + sample_entries[:3]

        assert namespaces(entries, "default") == ["default", "docker"]

    def test_default_namespace_present_when_empty(self):
        assert namespaces([], "default") == ["default"]
