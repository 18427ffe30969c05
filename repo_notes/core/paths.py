"""
Mapping of note identifiers to paths in the repository.
"""

from urllib.parse import quote

__all__ = [
    "resolve",
]


def resolve(identifier: str, root: str) -> str:
    """
    Get the canonical repository path of a note.

    Identifiers already under `root` are returned unchanged, so resolving is
    idempotent. Identifiers are not validated: empty strings, `..` segments
    etc. are passed through as-is.

    :param identifier: Note name relative to `root`, or a path including it
    :param root: Notes root, e.g. `notes/`
    """
    if identifier.startswith(root):
        return identifier
    return f"{root}{identifier}"


def quote_path(path: str) -> str:
    """
    Percent-encode a repository path for use in a URL, keeping separators.
    """
    return quote(path, safe="/")
