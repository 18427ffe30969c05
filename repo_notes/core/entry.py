"""
Models of entries as reported by the content API.
"""
from __future__ import annotations

import datetime
from typing import Any, Self

from pydantic import BaseModel, ConfigDict

__all__ = [
    "RemoteEntry",
    "CommitResult",
]


class RemoteEntry(BaseModel):
    """
    Snapshot of a note file as listed by the host.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    size: int

    last_modified: datetime.datetime
    """
    Modification time supplied by the host, or the time of listing if the
    host did not supply one; see `last_modified_known`.
    """

    last_modified_known: bool = True
    """
    Whether `last_modified` came from the host. If `False`, it is only the
    time of listing and says nothing about the file's history.
    """

    revision: str | None = None
    """
    Revision token (blob SHA) of the file at the time of listing.
    """

    @classmethod
    def from_listing(
        cls, item: dict[str, Any], now: datetime.datetime | None = None
    ) -> Self:
        """
        Populate model from an item of a directory listing.
        """
        last_modified = item.get("last_modified")

        if last_modified:
            return cls(
                name=item["name"],
                path=item["path"],
                size=item.get("size", 0),
                last_modified=last_modified,
                revision=item.get("sha"),
            )

        return cls(
            name=item["name"],
            path=item["path"],
            size=item.get("size", 0),
            last_modified=now or datetime.datetime.now(datetime.timezone.utc),
            last_modified_known=False,
            revision=item.get("sha"),
        )


class CommitResult(BaseModel):
    """
    Outcome of a write or delete as reported by the host.
    """

    model_config = ConfigDict(frozen=True)

    path: str

    revision: str | None
    """
    Revision token of the file after the commit; `None` after a delete.
    """

    commit_sha: str | None
    """
    SHA of the commit created by the host.
    """

    data: dict[str, Any]
    """
    Raw response from the host.
    """

    @classmethod
    def from_response(cls, path: str, data: dict[str, Any]) -> Self:
        content = data.get("content") or {}
        commit = data.get("commit") or {}

        return cls(
            path=content.get("path", path),
            revision=content.get("sha"),
            commit_sha=commit.get("sha"),
            data=data,
        )
