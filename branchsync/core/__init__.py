"""Core services for branchsync."""

from .git_service import GitError, GitRepository
from .reconciler import (
    MissingLogError,
    MissingRemoteError,
    PreconditionError,
    ReconcileAction,
    ReconcileResult,
    ensure_local_branch,
)
from .refname import RefKind, normalize_ref_name, parse_ref_name
from .worker import ReconcileService

__all__ = [
    "GitError",
    "GitRepository",
    "MissingLogError",
    "MissingRemoteError",
    "PreconditionError",
    "ReconcileAction",
    "ReconcileResult",
    "ReconcileService",
    "RefKind",
    "ensure_local_branch",
    "normalize_ref_name",
    "parse_ref_name",
]
