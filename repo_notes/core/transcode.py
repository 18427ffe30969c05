"""
Conversion between note text and the base64 payloads used by the content API.
"""

import base64
import binascii
import hashlib

from .exceptions import EncodingError

__all__ = [
    "encode",
    "decode",
    "blob_sha",
]


def encode(text: str) -> str:
    """
    Encode text as base64 of its UTF-8 bytes.

    Encoding to UTF-8 first is required; base64 operates on bytes, and
    characters outside latin-1 would otherwise be lost.
    """
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode(payload: str) -> str:
    """
    Decode a base64 payload as returned by the host into text.

    The host wraps payloads at 60 characters, so whitespace is removed
    before decoding.
    """
    compact = "".join(payload.split())

    try:
        blob = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Invalid base64 payload: {e}") from e

    try:
        return blob.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"Payload is not UTF-8 text: {e}") from e


def blob_sha(text: str) -> str:
    """
    Calculate the revision token the host assigns to a file with this text.

    This is the git blob id: SHA-1 over a `blob <size>\\0` header followed by
    the content bytes.
    """
    blob = text.encode("utf-8")
    header = f"blob {len(blob)}\0".encode("ascii")
    return hashlib.sha1(header + blob).hexdigest()
