"""Issue operations: create, view, edit and list."""

import logging

from rich.markup import escape

from lnr import documents, prompt
from lnr.decoders import (
    decode_created_issue,
    decode_issue,
    decode_issue_by_branch,
    decode_issues,
    decode_updated_issue,
)
from lnr.models import Comment, Issue, Priority, Project, State, Team
from lnr.request import Gql
from lnr.settings import Config
from lnr.viewer import get_viewer

logger = logging.getLogger(__name__)

# Never shown in listings
EXCLUDED_STATES = ["Done", "Backlog", "Triage", "Canceled", "Closed", "Merged to Dev"]

_TIME_FORMAT = "%Y-%m-%d %H:%M"


def create(
    config: Config,
    token: str,
    title: str,
    description: str,
    team: Team,
    project: Project | None,
    state: State,
    assignee_id: str,
    priority: Priority,
) -> str:
    """Create an issue assigned to `assignee_id` and return its URL."""
    response = (
        Gql(config, token, documents.ISSUE_CREATE)
        .put_string("title", title)
        .put_string("teamId", team.id)
        .put_integer("priority", priority)
        .put_string("stateId", state.id)
        .put_string("assigneeId", assignee_id)
        .put_string("description", description)
        .maybe_put_string("projectId", project.id if project else None)
        .run()
    )
    created = decode_created_issue(response)
    logger.debug("Created issue %s", created.identifier or created.id)
    return created.url


def get_by_branch(config: Config, token: str, branch: str) -> Issue:
    response = Gql(config, token, documents.ISSUE_BY_BRANCH).put_string("branchName", branch).run()
    return decode_issue_by_branch(response, branch)


def get_by_id(config: Config, token: str, issue_id: str) -> Issue:
    response = Gql(config, token, documents.ISSUE_BY_ID).put_string("id", issue_id).run()
    return decode_issue(response)


def view(config: Config, token: str, branch: str | None) -> str:
    """Show the issue for `branch`, or let the user pick one of theirs when None."""
    if branch is not None:
        return format_issue(get_by_branch(config, token, branch))

    viewer = get_viewer(config, token)
    issues = fetch_issues(config, token, viewer.id, None, None)
    chosen = prompt.select("Select an issue", issues, config)
    return format_issue(get_by_id(config, token, chosen.id))


def edit(config: Config, token: str, branch: str) -> str:
    """Edit the description of the branch's issue in $EDITOR. Returns the URL."""
    issue = get_by_branch(config, token, branch)
    description = prompt.editor("Description", issue.description or "", config)
    response = (
        Gql(config, token, documents.ISSUE_UPDATE)
        .put_string("id", issue.id)
        .put_string("description", description)
        .run()
    )
    return decode_updated_issue(response).url


def build_filter(assignee_id: str | None, team: Team | None, project: Project | None) -> dict:
    """IssueFilter for listings; all present conditions must hold."""
    issue_filter: dict = {"state": {"name": {"nin": EXCLUDED_STATES}}}
    if team is not None:
        issue_filter["team"] = {"id": {"eq": team.id}}
    if project is not None:
        issue_filter["project"] = {"id": {"eq": project.id}}
    if assignee_id is not None:
        issue_filter["assignee"] = {"id": {"eq": assignee_id}}
    return issue_filter


def fetch_issues(
    config: Config,
    token: str,
    assignee_id: str | None,
    team: Team | None,
    project: Project | None,
) -> list[Issue]:
    response = (
        Gql(config, token, documents.ISSUE_LIST)
        .put_object("filter", build_filter(assignee_id, team, project))
        .run()
    )
    return decode_issues(response)


def list_issues(
    config: Config,
    token: str,
    assignee_id: str | None,
    team: Team | None,
    project: Project | None,
) -> str:
    """List up to 50 open issues, parents first."""
    issues = fetch_issues(config, token, assignee_id, team, project)
    if not issues:
        return "No issues found"
    return "\n".join(format_issue_line(i) for i in issues)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_issue_line(issue: Issue) -> str:
    line = f"- [dim]{escape(issue.state.name)}[/dim] {escape(str(issue))}"
    if issue.is_parent:
        count = len(issue.children or [])
        line += f" [blue]({count} sub-issue{'s' if count != 1 else ''})[/blue]"
    return line


def _format_comment(comment: Comment, indent: str = "") -> list[str]:
    stamp = comment.created_at.strftime(_TIME_FORMAT)
    edited = " (edited)" if comment.edited_at else ""
    lines = [f"{indent}- [bold]{escape(comment.author_display_name)}[/bold] [dim]{stamp}{edited}[/dim]"]
    lines += [f"{indent}  {escape(body_line)}" for body_line in comment.body.splitlines()]
    for reply in comment.children or []:
        lines += _format_comment(reply, indent + "    ")
    return lines


def format_issue(issue: Issue) -> str:
    lines = [
        f"[bold cyan]{escape(issue.identifier)}[/bold cyan] {escape(issue.title)}",
        "",
        f"[bold]State:[/bold] {escape(issue.state.name)}",
        f"[bold]URL:[/bold] {issue.url}",
        f"[bold]Branch:[/bold] {escape(issue.branch_name)}",
        "",
        escape(issue.description) if issue.description else "[dim]No description provided.[/dim]",
    ]

    if issue.children:
        lines += ["", "[bold]Sub-issues[/bold]"]
        lines += [format_issue_line(child) for child in issue.children]

    if issue.comments:
        lines += ["", "[bold]Comments[/bold]"]
        for comment in issue.comments:
            lines += _format_comment(comment)

    return "\n".join(lines)
