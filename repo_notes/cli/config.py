"""
Interface to repository profiles as persisted in .yaml file.
"""
from __future__ import annotations

from pathlib import Path
from typing import Self

import yaml
from pydantic import BaseModel

from ..core import RepoConfig

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "ProfilesConfig",
]

DEFAULT_CONFIG_FILE = "repo-notes.yaml"


class ProfilesConfig(BaseModel):
    """
    Mapping of profile names to repository settings, e.g.:

    ```yaml
    profiles:
      personal:
        owner: octocat
        repo: notes
        token: ghp_...
        notes_dir: journal/
    ```
    """

    profiles: dict[str, RepoConfig]

    @classmethod
    def load_yaml(cls, file: Path) -> Self:
        """
        Load profiles from .yaml file.
        """
        with file.open() as fh:
            try:
                model = yaml.safe_load(fh)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid yaml: {e}") from e

        if not isinstance(model, dict):
            raise ValueError(f"Invalid yaml contents: {model}")

        return cls(**model)

    def dump_yaml(self, file: Path):
        """
        Dump profiles to .yaml file, omitting unset settings.
        """
        model = self.model_dump(exclude_none=True)
        file.write_text(
            yaml.safe_dump(model, default_flow_style=False, sort_keys=False)
        )
