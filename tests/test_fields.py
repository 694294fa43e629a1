"""Tests for jirakit.fields module."""

import pytest

from jirakit.fields import (
    MANDATORY_ISSUE_FIELDS,
    build_field_request,
    normalize_expand,
    normalize_fields,
)

MANDATORY_SORTED = ["created", "creator", "issuetype", "priority", "status", "summary"]


class TestNormalizeFields:
    """Tests for normalize_fields."""

    @pytest.mark.parametrize("requested", [None, [], ()])
    def test_empty_input_gives_mandatory_set(self, requested):
        """No request still yields the mandatory fields."""
        assert normalize_fields(requested) == MANDATORY_SORTED

    def test_merges_and_sorts(self):
        """Extra fields are merged and the result sorted."""
        assert normalize_fields(["labels", "assignee"]) == sorted(
            MANDATORY_ISSUE_FIELDS | {"labels", "assignee"}
        )

    def test_duplicates_collapse(self):
        """Duplicates, including mandatory ones, appear once."""
        result = normalize_fields(["summary", "assignee", "assignee", "status"])

        assert result.count("summary") == 1
        assert result.count("assignee") == 1
        assert len(result) == len(set(result))

    def test_whitespace_and_blanks(self):
        """Entries are stripped; blank ones are dropped."""
        result = normalize_fields([" labels ", "", "   "])

        assert "labels" in result
        assert "" not in result
        assert len(result) == 7

    def test_deterministic_order(self):
        """Input order does not change the output."""
        assert normalize_fields(["b", "a"]) == normalize_fields(["a", "b"])

    def test_bare_string_is_one_field(self):
        """A single string is not split into characters."""
        assert "assignee" in normalize_fields("assignee")
        assert "a" not in normalize_fields("assignee")

    def test_always_superset(self):
        """Every result contains the mandatory set."""
        for requested in (None, [], ["x"], ["summary"], list(MANDATORY_ISSUE_FIELDS)):
            assert MANDATORY_ISSUE_FIELDS <= set(normalize_fields(requested))


class TestNormalizeExpand:
    """Tests for normalize_expand."""

    def test_preserves_first_seen_order(self):
        """Expand directives keep caller order without duplicates."""
        assert normalize_expand(["renderedFields", "changelog", "renderedFields"]) == [
            "renderedFields",
            "changelog",
        ]

    def test_none_is_empty(self):
        """No expand gives an empty list."""
        assert normalize_expand(None) == []


class TestBuildFieldRequest:
    """Tests for FieldRequest parameters."""

    def test_query_parameters(self):
        """fields_param is comma-joined; expand_param empty without expand."""
        request = build_field_request(["assignee"])

        assert request.fields_param == "assignee,created,creator,issuetype,priority,status,summary"
        assert request.expand_param == ""

    def test_expand_param(self):
        """expand_param joins directives with commas."""
        assert build_field_request(None, ["changelog", "names"]).expand_param == "changelog,names"

    def test_usable_as_cache_key(self):
        """Equal selections are equal and hash alike."""
        a = build_field_request(["labels", "assignee"], ["changelog"])
        b = build_field_request(["assignee", "labels", "labels"], ["changelog"])

        assert a == b
        assert hash(a) == hash(b)
