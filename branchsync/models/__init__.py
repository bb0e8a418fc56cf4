"""Data models for branchsync."""

from .repository import (
    Branch,
    BranchCollection,
    Commit,
    ObjectId,
    Reference,
    Remote,
)
from .config import SyncConfig

__all__ = [
    "Branch",
    "BranchCollection",
    "Commit",
    "ObjectId",
    "Reference",
    "Remote",
    "SyncConfig",
]
