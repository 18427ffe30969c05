"""
repo-notes: a note store backed by files in a hosted repository.
"""

from pyrollup import rollup

from . import core
from .core import *  # noqa

__all__ = rollup(core)

__canonical_children__ = [
    "core",
]
