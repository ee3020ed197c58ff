"""Tests for lnr.decoders: success, not-found and malformed shapes."""

import json
import logging
import random

import pytest

from lnr.decoders import (
    decode_created_issue,
    decode_issue,
    decode_issue_by_branch,
    decode_issues,
    decode_team,
    decode_updated_issue,
    decode_viewer,
)
from lnr.errors import DecodeError, NotFoundError


class TestViewer:
    def test_unwraps_team_memberships(self, viewer_response: dict) -> None:
        viewer = decode_viewer(json.dumps(viewer_response))
        assert viewer.id == "viewer-1"
        assert [t.name for t in viewer.teams] == ["Backend"]
        assert viewer.teams[0].projects is not None
        assert viewer.teams[0].projects[0].name == "Roadmap"

    def test_missing_field_is_decode_error(self) -> None:
        body = json.dumps({"data": {"viewer": {"name": "Alan"}}})
        with pytest.raises(DecodeError, match="Could not parse response for viewer"):
            decode_viewer(body)


class TestTeam:
    def test_states(self, states_response: dict) -> None:
        team = decode_team(json.dumps(states_response))
        assert team.states is not None
        assert {s.name for s in team.states} == {"Todo", "In Progress", "Done"}


class TestCreatedIssue:
    def test_create(self, issue_create_response: dict) -> None:
        created = decode_created_issue(json.dumps(issue_create_response))
        assert created.identifier == "BE-3354"
        assert created.url == "https://linear.app/vardy/issue/BE-3354/test"

    def test_update(self) -> None:
        body = {"data": {"issueUpdate": {"issue": {"id": "i1", "url": "https://linear.app/x/issue/BE-1"}}}}
        assert decode_updated_issue(json.dumps(body)).url == "https://linear.app/x/issue/BE-1"

    def test_errors_envelope_embeds_raw_body(self) -> None:
        body = json.dumps({"data": None, "errors": [{"message": "Argument Validation Error"}]})
        with pytest.raises(DecodeError) as exc_info:
            decode_created_issue(body)
        assert "Argument Validation Error" in exc_info.value.message
        assert body in exc_info.value.message

    def test_not_json(self) -> None:
        with pytest.raises(DecodeError, match="<html>"):
            decode_created_issue("<html>gateway timeout</html>")


class TestIssueLookup:
    def test_by_branch(self, issue_detail_node: dict) -> None:
        body = json.dumps({"data": {"issueVcsBranchSearch": issue_detail_node}})
        issue = decode_issue_by_branch(body, "alan/be-3354")
        assert issue.identifier == "BE-3354"
        assert issue.comments is not None
        assert issue.comments[0].children is not None
        assert issue.comments[0].children[0].author_display_name == "Unknown"

    def test_branch_not_found(self) -> None:
        body = json.dumps({"data": {"issueVcsBranchSearch": None}})
        with pytest.raises(NotFoundError, match="Branch alan/nope not found"):
            decode_issue_by_branch(body, "alan/nope")

    def test_by_id_not_found(self) -> None:
        with pytest.raises(NotFoundError, match="Issue not found"):
            decode_issue(json.dumps({"data": {"issue": None}}))

    def test_missing_key_is_not_not_found(self) -> None:
        with pytest.raises(DecodeError):
            decode_issue(json.dumps({"data": {}}))

    def test_partial_success_is_logged(self, issue_detail_node: dict, caplog: pytest.LogCaptureFixture) -> None:
        body = json.dumps({"data": {"issue": issue_detail_node}, "errors": [{"message": "comments unavailable"}]})
        with caplog.at_level(logging.WARNING, logger="lnr.decoders"):
            issue = decode_issue(body)
        assert issue.identifier == "BE-3354"
        assert "comments unavailable" in caplog.text


class TestIssueList:
    def test_decodes_nodes(self, issue_list_response: dict) -> None:
        issues = decode_issues(json.dumps(issue_list_response))
        assert [i.identifier for i in issues] == ["SHO-2148"]
        assert issues[0].is_parent is False

    def test_parents_first_then_state_name(self, issue_node) -> None:
        child = issue_node("BE-99", "Child", "Todo")
        nodes = [
            issue_node("BE-1", "Leaf", "Todo"),
            issue_node("BE-2", "Parent", "Todo", children=[child]),
            issue_node("BE-3", "Leaf", "Blocked"),
            issue_node("BE-4", "Parent", "In Progress", children=[child]),
            issue_node("BE-5", "Leaf", "In Progress"),
            issue_node("BE-6", "Parent", "Blocked", children=[child]),
        ]
        random.Random(7).shuffle(nodes)

        issues = decode_issues(json.dumps({"data": {"issues": {"nodes": nodes}}}))

        flags = [i.is_parent for i in issues]
        assert flags == sorted(flags, reverse=True)
        parents = [i.state.name for i in issues if i.is_parent]
        leaves = [i.state.name for i in issues if not i.is_parent]
        assert parents == sorted(parents)
        assert leaves == sorted(leaves)

    def test_equal_keys_keep_api_order(self, issue_node) -> None:
        nodes = [issue_node("BE-2", "B", "Todo"), issue_node("BE-1", "A", "Todo")]
        issues = decode_issues(json.dumps({"data": {"issues": {"nodes": nodes}}}))
        assert [i.identifier for i in issues] == ["BE-2", "BE-1"]
