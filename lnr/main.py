"""lnr CLI: all commands."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Annotated

import typer
from rich import print as rprint
from rich.markup import escape

from lnr import git, issue, prompt, team, template, viewer
from lnr.console import setup_logging
from lnr.errors import LnrError, NotFoundError
from lnr.models import Priority, Project, State, Team
from lnr.settings import Config, EnvSettings, get_or_create

app = typer.Typer(help="A tiny unofficial Linear client", no_args_is_help=True)
issue_app = typer.Typer(help="Commands for issues", no_args_is_help=True)
org_app = typer.Typer(help="Commands for organizations", no_args_is_help=True)
template_app = typer.Typer(help="Commands for working with templates", no_args_is_help=True)

app.add_typer(issue_app, name="issue")
app.add_typer(issue_app, name="i", help="(i) Commands for issues", hidden=True)
app.add_typer(org_app, name="org")
app.add_typer(org_app, name="o", help="(o) Commands for organizations", hidden=True)
app.add_typer(template_app, name="template")
app.add_typer(template_app, name="t", help="(t) Commands for working with templates", hidden=True)

TeamOpt = Annotated[str | None, typer.Option("--team", "-e", help="Team name")]
NoProjectOpt = Annotated[bool, typer.Option("--noproject", "-n", help="Do not prompt for a project")]
PriorityOpt = Annotated[
    int | None,
    typer.Option("--priority", "-r", help="1 (Low), 2 (Normal), 3 (High), or 4 (Urgent)"),
]
StateOpt = Annotated[str | None, typer.Option("--state", "-s", help="i.e. Backlog or Todo")]


@dataclass
class GlobalOptions:
    config_path: str | None = None
    org: str | None = None


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        str | None,
        typer.Option("--config", "-c", help="Absolute path of configuration. Defaults to $XDG_CONFIG_HOME/lnr.cfg"),
    ] = None,
    org: Annotated[
        str | None,
        typer.Option("--org", "-o", help="You will be prompted at runtime if this isn't provided"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log requests to stderr")] = False,
) -> None:
    setup_logging(verbose)
    ctx.obj = GlobalOptions(config_path=config, org=org)


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Print any LnrError in red and exit 1."""
    try:
        yield
    except LnrError as exc:
        rprint(f"[red]{escape(exc.message)}[/red]")
        raise typer.Exit(1) from exc


def _options(ctx: typer.Context) -> GlobalOptions:
    return ctx.obj if isinstance(ctx.obj, GlobalOptions) else GlobalOptions()


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def fetch_config(ctx: typer.Context) -> Config:
    return get_or_create(_options(ctx).config_path)


def fetch_token(ctx: typer.Context, config: Config) -> str:
    """Token for --org, else LINEAR_API_KEY, else the only or a chosen organization."""
    org = _options(ctx).org
    if org is not None:
        return config.token(org)

    env_key = EnvSettings().linear_api_key
    if env_key is not None:
        return env_key.get_secret_value()

    names = sorted(config.organization_names())
    if not names:
        raise NotFoundError("Add an organization with org add")
    if len(names) == 1:
        return config.token(names[0])
    return config.token(prompt.select("Select an organization", names, config))


def get_priority(config: Config, priority: int | None) -> Priority:
    if priority is None:
        return prompt.select("Select priority", Priority.choices(), config)
    return Priority.from_flag(priority)


def get_project(config: Config, selected_team: Team | None, noproject: bool) -> Project | None:
    if noproject:
        return None
    return viewer.select_project(selected_team, config)


def get_state(config: Config, token: str, selected_team: Team, state: str | None) -> State:
    return team.state(config, token, selected_team, state)


def fetch_string(value: str | None, config: Config, desc: str) -> str:
    return value if value is not None else prompt.string(desc, config)


def fetch_editor(value: str | None, config: Config, desc: str) -> str:
    return value if value is not None else prompt.editor(desc, "", config)


def _mask(token: str) -> str:
    if len(token) <= 5:
        return "***"
    return f"...{token[-5:]}"


# ---------------------------------------------------------------------------
# Issues
# ---------------------------------------------------------------------------


def issue_create(
    ctx: typer.Context,
    title: Annotated[str | None, typer.Option("--title", "-t", help="Title for issue")] = None,
    description: Annotated[str | None, typer.Option("--description", "-d", help="Description for issue")] = None,
    priority: PriorityOpt = None,
    team_name: TeamOpt = None,
    noproject: NoProjectOpt = False,
    state: StateOpt = None,
) -> None:
    """(c) Create a new issue."""
    with _handle_errors():
        config = fetch_config(ctx)
        token = fetch_token(ctx, config)
        me = viewer.get_viewer(config, token)
        selected_team = viewer.team(me, team_name, config)
        selected_state = get_state(config, token, selected_team, state)
        selected_priority = get_priority(config, priority)
        project = get_project(config, selected_team, noproject)
        title = fetch_string(title, config, "Title")
        description = fetch_editor(description, config, "Description")

        url = issue.create(
            config,
            token,
            title,
            description,
            selected_team,
            project,
            selected_state,
            me.id,
            selected_priority,
        )
        rprint(url)


def issue_edit(ctx: typer.Context) -> None:
    """(e) Edit the issue for current branch."""
    with _handle_errors():
        config = fetch_config(ctx)
        token = fetch_token(ctx, config)
        rprint(issue.edit(config, token, git.get_branch()))


def issue_view(
    ctx: typer.Context,
    select: Annotated[bool, typer.Option("--select", "-s", help="Select ticket from list view")] = False,
) -> None:
    """(v) View the issue for current branch."""
    with _handle_errors():
        config = fetch_config(ctx)
        token = fetch_token(ctx, config)
        branch = None if select else git.get_branch()
        rprint(issue.view(config, token, branch))


def issue_list(
    ctx: typer.Context,
    team_name: TeamOpt = None,
    noproject: Annotated[bool, typer.Option("--noproject", "-n", help="Don't prompt for project")] = False,
    noteam: Annotated[bool, typer.Option("--noteam", "-t", help="Don't prompt for team")] = False,
) -> None:
    """(l) List issues, maximum of 50. Returns open issues assigned to you."""
    with _handle_errors():
        config = fetch_config(ctx)
        token = fetch_token(ctx, config)
        me = viewer.get_viewer(config, token)
        selected_team = None if noteam else viewer.team(me, team_name, config)
        project = get_project(config, selected_team, noproject)
        rprint(issue.list_issues(config, token, me.id, selected_team, project))


# ---------------------------------------------------------------------------
# Organizations
# ---------------------------------------------------------------------------


def org_add(ctx: typer.Context) -> None:
    """(a) Add an organization and token to config."""
    with _handle_errors():
        config = fetch_config(ctx)
        name = prompt.string("Input organization name", config)
        token = prompt.string("Input organization token", config)
        config.add_organization(name, token)
        rprint(config.save())


def org_remove(ctx: typer.Context) -> None:
    """(r) Remove an organization and token from config."""
    with _handle_errors():
        config = fetch_config(ctx)
        names = sorted(config.organization_names())
        if not names:
            raise NotFoundError("Add an organization with org add")
        config.remove_organization(prompt.select("Select an organization", names, config))
        rprint(config.save())


def org_list(ctx: typer.Context) -> None:
    """(l) List organizations in config."""
    with _handle_errors():
        config = fetch_config(ctx)
        if not config.organizations:
            rprint("No organizations in config")
            return
        orgs = [f"- {escape(name)}: {_mask(token)}" for name, token in sorted(config.organizations.items())]
        rprint("[green]Organizations[/green]\n\n" + "\n".join(orgs))


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


def template_evaluate(
    ctx: typer.Context,
    path: Annotated[str | None, typer.Option("--path", "-p", help="Path to file or directory")] = None,
    team_name: TeamOpt = None,
    noproject: NoProjectOpt = False,
    priority: PriorityOpt = None,
    state: StateOpt = None,
) -> None:
    """(e) Create issues from a TOML file."""
    with _handle_errors():
        config = fetch_config(ctx)
        token = fetch_token(ctx, config)
        me = viewer.get_viewer(config, token)
        selected_team = viewer.team(me, team_name, config)
        selected_priority = get_priority(config, priority)
        selected_state = get_state(config, token, selected_team, state)
        path = fetch_string(path, config, "Enter path to TOML file or directory")
        project = get_project(config, selected_team, noproject)

        rprint(
            template.evaluate(
                config,
                token,
                selected_team,
                project,
                me,
                path,
                selected_state,
                selected_priority,
            )
        )


# ---------------------------------------------------------------------------
# Registration (each command also answers to its one-letter alias)
# ---------------------------------------------------------------------------

for _app, _name, _alias, _command in [
    (issue_app, "create", "c", issue_create),
    (issue_app, "edit", "e", issue_edit),
    (issue_app, "view", "v", issue_view),
    (issue_app, "list", "l", issue_list),
    (org_app, "add", "a", org_add),
    (org_app, "remove", "r", org_remove),
    (org_app, "list", "l", org_list),
    (template_app, "evaluate", "e", template_evaluate),
]:
    _app.command(_name)(_command)
    _app.command(_alias, hidden=True)(_command)
