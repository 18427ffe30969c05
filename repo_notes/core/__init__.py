"""
This module implements access to notes stored as files in a hosted
repository, along with the settings and errors it uses.
"""

from pyrollup import rollup

from . import client, config, entry, exceptions, paths, transcode
from .client import *  # noqa
from .config import *  # noqa
from .entry import *  # noqa
from .exceptions import *  # noqa
from .paths import *  # noqa
from .transcode import *  # noqa

__all__ = rollup(
    client,
    config,
    entry,
    exceptions,
    paths,
    transcode,
)

__canonical_children__ = [
    "client",
    "config",
    "entry",
    "exceptions",
    "paths",
    "transcode",
]
