"""Create a tree of issues from TOML templates.

A template file looks like::

    [variables]
    service = "billing"

    [parent]
    title = "Migrate {{ service }} to Postgres 16"
    description = "Tracking issue"

    [[children]]
    title = "Upgrade {{ service }} staging"

Every ``{{ name }}`` must be bound in ``[variables]``; an unbound name is an
error rather than an empty string. The parent is created first and each child
is created with ``parentId`` set to it.
"""

import logging
from pathlib import Path

import jinja2
import tomlkit
from pydantic import BaseModel, ValidationError
from tomlkit.exceptions import TOMLKitError

from lnr import documents
from lnr.console import console
from lnr.decoders import decode_created_issue
from lnr.errors import TemplateError
from lnr.models import CreatedIssue, Priority, Project, State, Team, Viewer
from lnr.request import Gql
from lnr.settings import Config

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".toml"
# Package manifests live next to templates in repos; never treat them as templates
MANIFEST_NAMES = frozenset({"pyproject.toml", "Cargo.toml"})
DONE = "Done"

# Only {{ }} is interpreted. Block and comment tags start with NUL, which a
# TOML string cannot hold unescaped, so {% and {# stay literal text.
_env = jinja2.Environment(
    block_start_string="\x00{%",
    block_end_string="%}\x00",
    comment_start_string="\x00{#",
    comment_end_string="#}\x00",
    undefined=jinja2.StrictUndefined,
    autoescape=False,
    keep_trailing_newline=True,
)


class TemplateIssue(BaseModel):
    title: str
    description: str | None = None


class TemplateDocument(BaseModel):
    parent: TemplateIssue
    children: list[TemplateIssue] = []
    variables: dict[str, str] = {}


def fill_in_variables(template: str, variables: dict[str, str]) -> str:
    try:
        return _env.from_string(template).render(variables)
    except jinja2.TemplateError as exc:
        raise TemplateError(f"Could not render template: {exc}") from exc


def is_template_file(path: Path) -> bool:
    return path.is_file() and path.name.endswith(TEMPLATE_SUFFIX) and path.name not in MANIFEST_NAMES


def template_paths(path: Path) -> list[Path]:
    """The templates under a directory, in sorted order for stable output."""
    return sorted(p for p in path.rglob(f"*{TEMPLATE_SUFFIX}") if is_template_file(p))


def load_template(path: Path) -> TemplateDocument:
    try:
        raw = path.read_text()
    except OSError:
        raise TemplateError(f"Could not read template {path}") from None
    try:
        return TemplateDocument.model_validate(tomlkit.parse(raw).unwrap())
    except (TOMLKitError, ValidationError) as exc:
        raise TemplateError(f"Could not parse template {path}:\n{exc}") from exc


class _IssueFactory:
    """Sends issueCreate with the fields shared by every node of a template."""

    def __init__(
        self,
        config: Config,
        token: str,
        team: Team,
        project: Project | None,
        viewer: Viewer,
        state: State,
        priority: Priority,
    ) -> None:
        self.config = config
        self.token = token
        self.team = team
        self.project = project
        self.viewer = viewer
        self.state = state
        self.priority = priority

    def create(self, title: str, description: str, parent_id: str | None = None) -> CreatedIssue:
        response = (
            Gql(self.config, self.token, documents.ISSUE_CREATE)
            .put_string("title", title)
            .put_string("teamId", self.team.id)
            .put_integer("priority", self.priority)
            .put_string("stateId", self.state.id)
            .put_string("assigneeId", self.viewer.id)
            .put_string("description", description)
            .maybe_put_string("parentId", parent_id)
            .maybe_put_string("projectId", self.project.id if self.project else None)
            .run()
        )
        return decode_created_issue(response)


def create_issues(factory: _IssueFactory, path: Path) -> str:
    """Create the parent and children described by one template file."""
    doc = load_template(path)
    console.print(f"Processing {path}", markup=False, highlight=False)

    title = fill_in_variables(doc.parent.title, doc.variables)
    description = fill_in_variables(doc.parent.description or "", doc.variables)
    parent = factory.create(title, description)
    console.print(f"- [{parent.id}] {parent.url}", markup=False, highlight=False)

    for child in doc.children:
        title = fill_in_variables(child.title, doc.variables)
        description = fill_in_variables(child.description or "", doc.variables)
        created = factory.create(title, description, parent_id=parent.id)
        console.print(f"  - [{created.id}] {created.url}", markup=False, highlight=False)

    logger.debug("Created %d issue(s) from %s", 1 + len(doc.children), path)
    return DONE


def evaluate(
    config: Config,
    token: str,
    team: Team,
    project: Project | None,
    viewer: Viewer,
    path: str,
    state: State,
    priority: Priority,
) -> str:
    """Create issues from a template file, or from every template under a directory.

    Stops at the first failure; issues created before it are kept.
    """
    factory = _IssueFactory(config, token, team, project, viewer, state, priority)
    target = Path(path).expanduser()
    if target.is_dir():
        for template in template_paths(target):
            create_issues(factory, template)
        return DONE
    return create_issues(factory, target)
