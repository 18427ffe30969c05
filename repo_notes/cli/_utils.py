"""
Utilities specific to CLI functionality.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

from rich.console import Console
from rich.logging import RichHandler
from typer import Context, Exit, Typer
from typer.core import TyperArgument, TyperOption

from ..core import ConfigurationError, NotesError, RemoteError

if TYPE_CHECKING:
    from .main import RootContext


OPTION_MSG = "Set via CLI option, environment variable, or .env file."
"""
Hint to show upon missing settings.
"""

STATUS_HINTS: dict[int, str] = {
    401: "The token is invalid or lacks permission; make sure it has access to repository contents.",
    403: "Access denied or rate limit exceeded.",
    404: "Repository, branch or path not found; check GITHUB_OWNER, GITHUB_REPO and GITHUB_BRANCH.",
}
"""
Hints to show upon failure responses, by status code.
"""

console = Console()
log_console = Console(stderr=True)

rich_handler = RichHandler(
    console=log_console,
    rich_tracebacks=True,
    show_level=True,
    show_time=True,
    show_path=False,
)
rich_handler.setFormatter(logging.Formatter("%(message)s"))

logger = logging.getLogger("repo-notes")
logger.setLevel(logging.INFO)
logger.addHandler(rich_handler)
logger.propagate = False


class MainTyper(Typer):
    """
    Typer app with preconfigured settings.
    """

    def __init__(self, name: str, *, help: str):
        return super().__init__(
            name=name,
            help=help,
            rich_markup_mode="markdown",
            no_args_is_help=True,
            add_completion=False,
        )


def get_root_context(ctx: Context) -> RootContext:
    from .main import RootContext

    root_context = ctx.find_object(RootContext)
    assert isinstance(root_context, RootContext)
    return root_context


def lookup_param(
    ctx: Context, name: str
) -> TyperArgument | TyperOption:
    """
    Lookup param by name.
    """
    param = next((p for p in ctx.command.params if p.name == name), None)
    assert param
    return param


@contextmanager
def exit_on_error() -> Iterator[None]:
    """
    Convert errors from the client into a nonzero exit code, logging a hint
    if one applies. The client has already logged the error itself.
    """
    try:
        yield
    except NotesError as e:
        if isinstance(e, ConfigurationError):
            logger.error(OPTION_MSG)
        elif isinstance(e, RemoteError) and e.status in STATUS_HINTS:
            logger.error(STATUS_HINTS[e.status])

        raise Exit(code=1)
