"""
Entry point of `repo-notes` CLI.
"""
from __future__ import annotations

import datetime
import sys
from dataclasses import dataclass
from pathlib import Path

import dotenv
import requests
from pydantic import ValidationError
from rich.table import Table
from typer import Argument, BadParameter, Context, Option, confirm, echo

from ..core import (
    DEFAULT_API_URL,
    DEFAULT_NOTE_EXTENSION,
    DEFAULT_NOTES_DIR,
    ContentClient,
    RepoConfig,
)
from ._utils import (
    MainTyper,
    console,
    exit_on_error,
    get_root_context,
    logger,
    lookup_param,
)
from .config import DEFAULT_CONFIG_FILE, ProfilesConfig

PROBE_NOTE = "test_connection.txt"
"""
Note created and deleted by `check --write-probe`.
"""

dotenv.load_dotenv()

app = MainTyper(
    "repo-notes",
    help="Notes stored as text files in a hosted repository",
)


@app.callback()
def main(
    ctx: Context,
    token: str
    | None = Option(
        None,
        help="API token",
        envvar="GITHUB_TOKEN",
    ),
    owner: str
    | None = Option(
        None,
        help="Account or organization owning the repository",
        envvar="GITHUB_OWNER",
    ),
    repo: str
    | None = Option(
        None,
        help="Repository name",
        envvar="GITHUB_REPO",
    ),
    notes_dir: str = Option(
        DEFAULT_NOTES_DIR,
        help="Path prefix under which notes are stored",
        envvar="GITHUB_NOTES_DIR",
    ),
    note_extension: str = Option(
        DEFAULT_NOTE_EXTENSION,
        "--notes-ext",
        help="Extension of files listed as notes",
        envvar="GITHUB_NOTES_EXT",
    ),
    branch: str
    | None = Option(
        None,
        help="Branch to use instead of the repository's default branch",
        envvar="GITHUB_BRANCH",
    ),
    api_url: str = Option(
        DEFAULT_API_URL,
        help="Base URL of API",
        envvar="GITHUB_API_URL",
    ),
    profile: str
    | None = Option(
        None,
        "--profile",
        help="Profile name as configured in .yaml",
        envvar="REPO_NOTES_PROFILE",
    ),
    config_file: Path = Option(
        DEFAULT_CONFIG_FILE,
        help=".yaml file containing profiles, only applicable with --profile",
        envvar="REPO_NOTES_CONFIG_FILE",
        dir_okay=False,
    ),
):
    if profile:
        root_context = RootContext.from_profile(
            ctx=ctx, profile=profile, config_file=config_file
        )
    else:
        config = RepoConfig(
            token=token,
            owner=owner,
            repo=repo,
            notes_dir=notes_dir,
            note_extension=note_extension,
            branch=branch,
            api_url=api_url,
        )
        root_context = RootContext(config=config)

    ctx.obj = root_context


@app.command()
def check(
    ctx: Context,
    deep: bool = Option(
        False,
        "--deep",
        help="Also check the authenticated user and the branch",
    ),
    write_probe: bool = Option(
        False,
        "--write-probe",
        help=f"Also create and delete '{PROBE_NOTE}' under the notes root",
    ),
):
    """
    Check repository connection
    """
    root_context = get_root_context(ctx)
    config = root_context.config

    with root_context.create_client() as client, exit_on_error():
        client.verify_connection()
        logger.info(f"Connected to repository '{config.owner}/{config.repo}'")

        if deep:
            user = client.get_user()
            logger.info(f"Authenticated as '{user.get('login')}'")

            branch = client.get_branch()
            logger.info(f"Found branch '{branch.get('name')}'")

        if write_probe:
            now = datetime.datetime.now(datetime.timezone.utc).isoformat()

            client.put_content(
                PROBE_NOTE, f"Connection test at {now}", "Test connection"
            )
            client.delete_entry(PROBE_NOTE, "Remove connection test")

            logger.info(f"Created and deleted '{client.resolve(PROBE_NOTE)}'")


@app.command("ls")
def list_notes(ctx: Context):
    """
    List notes
    """
    root_context = get_root_context(ctx)

    with root_context.create_client() as client, exit_on_error():
        entries = client.list_entries()

    if not entries:
        logger.info(f"No notes under '{root_context.config.notes_dir}'")
        return

    table = Table("Name", "Size", "Revision", "Modified")

    for entry in entries:
        modified = (
            entry.last_modified.isoformat()
            if entry.last_modified_known
            else "-"
        )
        revision = entry.revision[:7] if entry.revision else "-"
        table.add_row(entry.name, str(entry.size), revision, modified)

    console.print(table)


@app.command()
def cat(
    ctx: Context,
    note: str = Argument(help="Note name or path"),
):
    """
    Print text of note
    """
    root_context = get_root_context(ctx)

    with root_context.create_client() as client, exit_on_error():
        text = client.get_content(note)

    echo(text, nl=False)


@app.command()
def put(
    ctx: Context,
    note: str = Argument(help="Note name or path"),
    source: Path
    | None = Argument(
        None,
        help="File to read text from; stdin if omitted",
        exists=True,
        dir_okay=False,
    ),
    message: str = Option(
        "Update note",
        "-m",
        "--message",
        help="Commit message",
    ),
):
    """
    Create or replace note
    """
    root_context = get_root_context(ctx)

    if source is not None:
        text = source.read_text(encoding="utf-8")
    else:
        text = sys.stdin.read()

    with root_context.create_client() as client, exit_on_error():
        result = client.put_content(note, text, message)

    logger.info(f"Wrote '{result.path}', revision {result.revision}")


@app.command()
def rm(
    ctx: Context,
    note: str = Argument(help="Note name or path"),
    message: str = Option(
        "Delete note",
        "-m",
        "--message",
        help="Commit message",
    ),
    yes: bool = Option(
        False,
        "-y",
        "--yes",
        help="Don't ask for confirmation",
    ),
):
    """
    Delete note
    """
    root_context = get_root_context(ctx)

    with root_context.create_client() as client:
        path = client.resolve(note)

        if not yes:
            confirm(f"Delete '{path}'?", abort=True)

        with exit_on_error():
            result = client.delete_entry(note, message)

    logger.info(f"Deleted '{result.path}' in commit {result.commit_sha}")


def run():
    app()


def new_http_session() -> requests.Session:
    """
    Create transport for a client.
    """
    return requests.Session()


@dataclass(kw_only=True)
class RootContext:
    config: RepoConfig

    @classmethod
    def from_profile(
        cls,
        *,
        ctx: Context,
        profile: str,
        config_file: Path,
    ) -> RootContext:
        # ensure config file exists
        if not config_file.is_file():
            raise BadParameter(
                f"file does not exist: {config_file}",
                ctx=ctx,
                param=lookup_param(ctx, "config_file"),
            )

        # get profiles from file
        try:
            profiles = ProfilesConfig.load_yaml(config_file)
        except (ValueError, ValidationError, OSError) as e:
            raise BadParameter(
                f"failed to load config file '{config_file}': {e}",
                ctx=ctx,
                param=lookup_param(ctx, "config_file"),
            )

        config = profiles.profiles.get(profile)
        if config is None:
            raise BadParameter(
                f"profile '{profile}' not found in '{config_file}'",
                ctx=ctx,
                param=lookup_param(ctx, "profile"),
            )

        return RootContext(config=config)

    def create_client(self) -> ContentClient:
        return ContentClient(
            self.config, http=new_http_session(), logger=logger
        )


if __name__ == "__main__":
    app()
