"""Current git branch lookup."""

import subprocess

from lnr.errors import GitError


def get_branch() -> str:
    try:
        result = subprocess.run(["git", "branch", "--show-current"], capture_output=True, text=True)
    except OSError as exc:
        raise GitError(f"Could not run git: {exc}") from exc
    if result.returncode != 0:
        raise GitError(result.stderr.strip() or "Could not determine current git branch")
    branch = result.stdout.strip()
    if not branch:
        raise GitError("Not on a branch (detached HEAD?)")
    return branch
