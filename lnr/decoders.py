"""Response decoders: raw JSON text to a record or a named failure.

Each operation has an envelope describing the path to its entity
(``data.<operation>.<entity>``). Decoding ends in one of three outcomes:

* the record, when the envelope validates;
* :class:`~lnr.errors.NotFoundError`, when the API returned an explicit null
  for a lookup that is allowed to miss (view by branch, view by id);
* :class:`~lnr.errors.DecodeError` for anything else, carrying the validation
  error and the raw body, since the API's ``errors`` array is not surfaced
  separately.
"""

import logging
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from lnr.errors import DecodeError, NotFoundError
from lnr.models import CreatedIssue, Issue, Team, Viewer, unwrap_nodes

logger = logging.getLogger(__name__)

DataT = TypeVar("DataT")


class _Shape(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Envelope(_Shape, Generic[DataT]):
    data: DataT
    errors: list[dict[str, Any]] | None = None


class _ViewerData(_Shape):
    viewer: Viewer


class _TeamData(_Shape):
    team: Team


class _IssuePayload(_Shape):
    issue: CreatedIssue


class _IssueCreateData(_Shape):
    issue_create: _IssuePayload


class _IssueUpdateData(_Shape):
    issue_update: _IssuePayload


class _BranchSearchData(_Shape):
    issue_vcs_branch_search: Issue | None


class _IssueData(_Shape):
    issue: Issue | None


class _IssuesData(_Shape):
    issues: list[Issue]

    unwrap_connections = field_validator("issues", mode="before")(unwrap_nodes)


def _decode(response: str, shape: type[DataT], what: str) -> DataT:
    try:
        envelope = Envelope[shape].model_validate_json(response)  # type: ignore[valid-type]
    except ValidationError as exc:
        raise DecodeError(f"Could not parse response for {what}:\n---\n{exc}\n---\n{response}") from None
    if envelope.errors:
        messages = "; ".join(str(e.get("message", e)) for e in envelope.errors)
        logger.warning("Partial response for %s, API reported: %s", what, messages)
    return envelope.data


def decode_viewer(response: str) -> Viewer:
    return _decode(response, _ViewerData, "viewer").viewer


def decode_team(response: str) -> Team:
    return _decode(response, _TeamData, "states").team


def decode_created_issue(response: str) -> CreatedIssue:
    return _decode(response, _IssueCreateData, "issue").issue_create.issue


def decode_updated_issue(response: str) -> CreatedIssue:
    return _decode(response, _IssueUpdateData, "issue update").issue_update.issue


def decode_issue_by_branch(response: str, branch: str) -> Issue:
    issue = _decode(response, _BranchSearchData, "issue").issue_vcs_branch_search
    if issue is None:
        raise NotFoundError(f"Branch {branch} not found")
    return issue


def decode_issue(response: str) -> Issue:
    issue = _decode(response, _IssueData, "issue").issue
    if issue is None:
        raise NotFoundError("Issue not found")
    return issue


def issue_sort_key(issue: Issue) -> str:
    """Parents first, then by state name."""
    return ("0" if issue.is_parent else "1") + issue.state.name


def decode_issues(response: str) -> list[Issue]:
    issues = _decode(response, _IssuesData, "issues").issues
    return sorted(issues, key=issue_sort_key)
