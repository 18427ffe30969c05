"""
Repository settings used by the content client.
"""
from __future__ import annotations

import os
from typing import Any, Mapping, Self

from pydantic import BaseModel, ConfigDict, field_validator

from .exceptions import ConfigurationError

__all__ = [
    "RepoConfig",
    "DEFAULT_API_URL",
    "DEFAULT_NOTES_DIR",
    "DEFAULT_NOTE_EXTENSION",
]

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_NOTES_DIR = "notes/"
DEFAULT_NOTE_EXTENSION = ".txt"

ENV_KEYS: dict[str, str] = {
    "token": "GITHUB_TOKEN",
    "owner": "GITHUB_OWNER",
    "repo": "GITHUB_REPO",
    "notes_dir": "GITHUB_NOTES_DIR",
    "branch": "GITHUB_BRANCH",
    "api_url": "GITHUB_API_URL",
    "note_extension": "GITHUB_NOTES_EXT",
}
"""
Mapping of field names to environment variables.
"""


class RepoConfig(BaseModel):
    """
    Immutable settings identifying the repository and the notes within it.

    Any field may be unset; requirements are only enforced when an operation
    needs them, via {obj}`RepoConfig.require`.
    """

    model_config = ConfigDict(frozen=True)

    token: str | None = None
    """
    API token, sent as `Authorization: token <token>` if set.
    """

    owner: str | None = None
    """
    Account or organization owning the repository.
    """

    repo: str | None = None
    """
    Repository name.
    """

    notes_dir: str = DEFAULT_NOTES_DIR
    """
    Path prefix under which notes are stored.
    """

    branch: str | None = None
    """
    Branch to read and commit to; host's default branch if unset.
    """

    api_url: str = DEFAULT_API_URL
    note_extension: str = DEFAULT_NOTE_EXTENSION

    @field_validator("token", "owner", "repo", "branch", mode="before")
    def validate_optional(cls, value: Any) -> Any:
        # treat empty values from environment as unset
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("api_url", mode="after")
    def validate_api_url(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        """
        Read settings from environment variables.

        Intended to be called once at startup; the resulting value is passed
        to the client rather than re-reading the environment per request.
        """
        env = os.environ if environ is None else environ

        values = {
            field: env[key]
            for field, key in ENV_KEYS.items()
            if env.get(key, "") != ""
        }

        return cls(**values)

    def require(self, *fields: str):
        """
        Ensure the given fields are set.

        :raises ConfigurationError: Naming every missing field
        """
        missing = [ENV_KEYS[f] for f in fields if getattr(self, f) is None]

        if missing:
            raise ConfigurationError(missing)

    @property
    def repo_path(self) -> str:
        """
        API path of the repository, e.g. `/repos/octocat/notes`.
        """
        self.require("owner", "repo")
        return f"/repos/{self.owner}/{self.repo}"

    def __str__(self) -> str:
        token = "set" if self.token else "unset"
        return (
            f"RepoConfig(owner={self.owner}, repo={self.repo}, "
            f"notes_dir={self.notes_dir}, branch={self.branch}, token={token})"
        )
