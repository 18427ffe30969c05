"""
Client for notes stored as files in a hosted repository, using the host's
content API as storage.
"""

from __future__ import annotations

import datetime
import logging
from contextlib import contextmanager
from logging import Logger
from typing import Any, Iterator

import requests

from .config import RepoConfig
from .entry import CommitResult, RemoteEntry
from .exceptions import (
    AuthError,
    ConflictError,
    ContentEmptyError,
    NotesError,
    NotFoundError,
    RemoteError,
    TransportError,
)
from .paths import quote_path, resolve
from .transcode import blob_sha, decode, encode

__all__ = [
    "ContentClient",
]

ACCEPT = "application/vnd.github.v3+json"
"""
Media type requested from the content API.
"""

DEFAULT_BRANCH = "main"
"""
Branch looked up by {obj}`ContentClient.get_branch` if none is configured.
"""

MUTATING_METHODS = {"PUT", "DELETE"}


class ContentClient:
    """
    Interface to notes stored under a directory of a hosted repository.

    Every note is a text file under {obj}`RepoConfig.notes_dir`. Writes and
    deletes follow the host's optimistic concurrency contract: the revision
    token (blob SHA) of the file being replaced is fetched immediately before
    each mutating request. Tokens are never cached across operations.

    If the file changes on the host between the fetch and the mutating
    request, the host rejects the request and {obj}`ConflictError` is raised.
    Nothing is retried.

    Example usage:

    ```
    config = RepoConfig.from_env()

    with ContentClient(config) as client:
        client.put_content("todo.txt", "- water plants", "Add todo")
        assert client.get_content("todo.txt") == "- water plants"
    ```
    """

    _config: RepoConfig
    """
    Settings as provided by user.
    """

    _http: requests.Session
    """
    Transport, reused across requests.
    """

    _logger: Logger
    """
    Logger to use.
    """

    def __init__(
        self,
        config: RepoConfig,
        *,
        http: requests.Session | None = None,
        logger: Logger | None = None,
    ):
        """
        :param config: Repository settings
        :param http: Session to issue requests with, or `None` to create one;
            its `Accept` and `Authorization` headers are set by this client
        :param logger: Logger to use, or `None` to use default logger
        """
        self._config = config
        self._logger = logger or logging.getLogger()

        self._http = http or requests.Session()
        self._http.headers["Accept"] = ACCEPT

        if config.token:
            self._http.headers["Authorization"] = f"token {config.token}"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, traceback):
        self.close()

    def __str__(self) -> str:
        return f"ContentClient({self._config})"

    @property
    def config(self) -> RepoConfig:
        return self._config

    def close(self):
        """
        Release connections held by the transport.
        """
        self._http.close()

    def resolve(self, identifier: str) -> str:
        """
        Get the repository path of a note, prefixing the notes root unless
        already present.
        """
        return resolve(identifier, self._config.notes_dir)

    def verify_connection(self) -> bool:
        """
        Check that the configured repository is accessible with the
        configured token.

        :raises ConfigurationError: If token, owner or repository is unset; no request is made in this case
        :raises RemoteError: If the host responds with a failure status
        :raises TransportError: If the host can't be reached

        :returns: `True` if the host responded with status 200
        """
        with self._failure_logged("verify connection"):
            self._config.require("token", "owner", "repo")
            response = self._request("GET", self._config.repo_path)

        self._logger.debug(
            f"Connected to repository '{self._config.owner}/{self._config.repo}'"
        )
        return response.status_code == 200

    def get_content(self, identifier: str) -> str:
        """
        Get text of a note.

        :param identifier: Note name or path

        :raises NotFoundError: If the note does not exist
        :raises ContentEmptyError: If the host returned no content, e.g. for a directory or a file too large to be inlined
        """
        path = self.resolve(identifier)

        with self._failure_logged(f"get content of '{path}'"):
            data = self._fetch(path)

            content = data.get("content") if isinstance(data, dict) else None

            # files over the inline size limit are returned with
            # encoding "none" and an empty content field
            if content is None or data.get("encoding") == "none":
                raise ContentEmptyError(path)

            return decode(content)

    def get_revision(self, identifier: str) -> str | None:
        """
        Get the current revision token of a note.

        :param identifier: Note name or path

        :returns: Revision token, or `None` if the note does not exist
        """
        path = self.resolve(identifier)

        with self._failure_logged(f"get revision of '{path}'"):
            return self._get_revision(path)

    def put_content(
        self, identifier: str, text: str, message: str = "Update note"
    ) -> CommitResult:
        """
        Create a note or replace its text.

        The current revision token is fetched first and sent along with the
        new content; if there's no existing note, the token is omitted and
        the host creates the file.

        :param identifier: Note name or path
        :param text: New text of note
        :param message: Commit message

        :raises ConflictError: If the note was changed on the host after its token was fetched
        """
        path = self.resolve(identifier)

        with self._failure_logged(f"put content of '{path}'"):
            sha = self._get_revision(path)

            self._logger.debug(
                f"Writing '{path}': {'replacing ' + sha if sha else 'creating'}"
            )

            body = self._commit_body(message, content=encode(text), sha=sha)
            response = self._request(
                "PUT", self._contents_path(path), body=body
            )

            result = CommitResult.from_response(path, self._json(response))

        # sanity check to ensure host stored the expected bytes
        digest = blob_sha(text)
        if result.revision is not None and result.revision != digest:
            self._logger.warning(
                f"Unexpected revision for '{path}': expected {digest}, got {result.revision}"
            )

        return result

    def list_entries(self) -> list[RemoteEntry]:
        """
        List notes under the notes root. Only files having the note extension
        are included; other files and subdirectories are skipped.

        :returns: Entries in the order listed by the host, or an empty list if the notes root does not exist
        """
        root = self._config.notes_dir
        extension = self._config.note_extension

        with self._failure_logged(f"list notes under '{root}'"):
            try:
                data = self._fetch(root)
            except NotFoundError:
                self._logger.debug(f"Notes root '{root}' does not exist")
                return []

            if not isinstance(data, list):
                raise RemoteError(None, f"Notes root '{root}' is not a directory")

        now = datetime.datetime.now(datetime.timezone.utc)

        return [
            RemoteEntry.from_listing(item, now)
            for item in data
            if item.get("type") == "file"
            and item.get("name", "").endswith(extension)
        ]

    def delete_entry(
        self, identifier: str, message: str = "Delete note"
    ) -> CommitResult:
        """
        Delete a note.

        :param identifier: Note name or path
        :param message: Commit message

        :raises NotFoundError: If the note does not exist
        :raises ConflictError: If the note was changed on the host after its token was fetched
        """
        path = self.resolve(identifier)

        with self._failure_logged(f"delete '{path}'"):
            # token is mandatory for deletes, so a missing file fails here
            data = self._fetch(path)

            if not isinstance(data, dict) or not data.get("sha"):
                raise RemoteError(None, f"'{path}' is not a file")

            body = self._commit_body(message, sha=data["sha"])
            response = self._request(
                "DELETE", self._contents_path(path), body=body
            )

            return CommitResult.from_response(path, self._json(response))

    def get_user(self) -> dict[str, Any]:
        """
        Get the account the token authenticates as.
        """
        with self._failure_logged("get authenticated user"):
            self._config.require("token")
            return self._json(self._request("GET", "/user"))

    def get_branch(self, name: str | None = None) -> dict[str, Any]:
        """
        Get info of a branch, by default the configured one.

        :param name: Branch name, or `None` to use configured branch or `main`
        """
        branch = name or self._config.branch or DEFAULT_BRANCH

        with self._failure_logged(f"get branch '{branch}'"):
            path = f"{self._config.repo_path}/branches/{quote_path(branch)}"
            return self._json(self._request("GET", path))

    @contextmanager
    def _failure_logged(self, action: str) -> Iterator[None]:
        """
        Log errors raised within the context and re-raise them.
        """
        try:
            yield
        except NotesError as e:
            self._logger.error(f"Failed to {action}: {e}")
            raise

    def _get_revision(self, path: str) -> str | None:
        try:
            data = self._fetch(path)
        except NotFoundError:
            self._logger.debug(f"No existing file at '{path}'")
            return None

        if not isinstance(data, dict):
            raise RemoteError(None, f"'{path}' is a directory")

        return data.get("sha")

    def _fetch(self, path: str) -> Any:
        """
        Get metadata and content of a file, or the listing of a directory.
        """
        params = {"ref": self._config.branch} if self._config.branch else None
        response = self._request(
            "GET", self._contents_path(path), params=params
        )
        return self._json(response)

    def _commit_body(self, message: str, **fields: Any) -> dict[str, Any]:
        body: dict[str, Any] = {"message": message, **fields}

        if self._config.branch:
            body["branch"] = self._config.branch

        return body

    def _contents_path(self, path: str) -> str:
        return f"{self._config.repo_path}/contents/{quote_path(path)}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> requests.Response:
        """
        Issue request and translate failures into {obj}`NotesError`.
        """
        url = f"{self._config.api_url}{path}"

        try:
            response = self._http.request(method, url, params=params, json=body)
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        self._logger.debug(f"{method} {url} response: {response.status_code}")

        if not response.ok:
            raise _get_error(method, response)

        return response

    def _json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(
                response.status_code, f"Invalid JSON in response: {e}"
            ) from e


def _get_error(method: str, response: requests.Response) -> RemoteError:
    """
    Map a failure response to the corresponding error.
    """
    status = response.status_code
    message = _get_message(response)

    error_cls: type[RemoteError]

    if status == 404:
        error_cls = NotFoundError
    elif status == 409 or (status == 422 and method in MUTATING_METHODS):
        error_cls = ConflictError
    elif status in (401, 403):
        error_cls = AuthError
    else:
        error_cls = RemoteError

    return error_cls(status, message)


def _get_message(response: requests.Response) -> str:
    """
    Get message provided by host, falling back to HTTP reason.
    """
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])

    return response.reason or response.text
