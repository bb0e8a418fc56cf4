"""Create or update a local branch for a CI-reported branch name."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from branchsync.models.repository import Branch, Commit, Remote

from .interfaces import InfoLog, Repository
from .refname import ParsedRef, parse_ref_name

logger = logging.getLogger(__name__)


class PreconditionError(ValueError):
    """A required collaborator was not supplied."""

    def __init__(self, argument: str) -> None:
        super().__init__(f"{argument} is required")
        self.argument = argument


class MissingLogError(PreconditionError):
    def __init__(self) -> None:
        super().__init__("log")


class MissingRemoteError(PreconditionError):
    def __init__(self) -> None:
        super().__init__("remote")


class ReconcileAction(Enum):
    """Which mutation the reconciler performed."""

    CREATED = "created"
    UPDATED = "updated"


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of a reconciliation."""

    # Name that was created/updated and checked out
    canonical_name: str
    action: ReconcileAction
    target: Commit


def find_branch(branches: Iterable[Branch], canonical_name: str) -> Branch | None:
    """Return the first branch whose canonical name matches ignoring case."""
    wanted = canonical_name.casefold()
    for branch in branches:
        if branch.canonical_name.casefold() == wanted:
            return branch
    return None


def branch_exists(branches: Iterable[Branch], canonical_name: str) -> bool:
    """Check whether a branch exists, comparing names case-insensitively."""
    return find_branch(branches, canonical_name) is not None


def remote_tracking_name(remote: Remote, identifier: str) -> str:
    return f"{remote.name}/{identifier}"


def resolve_tip(repository: Repository, identifier: str, remote: Remote) -> Commit:
    """Compute the commit the local branch should point at.

    Prefers the tip of ``<remote>/<identifier>`` when such a branch is
    known, otherwise falls back to the current HEAD tip.
    """
    origin_branch = repository.branches.get(remote_tracking_name(remote, identifier))
    if origin_branch is not None:
        return origin_branch.tip
    return repository.head.tip


def checkout_branch(repository: Repository, canonical_name: str) -> None:
    """Switch the working copy to the given branch."""
    repository.checkout(canonical_name)


def _create(
    repository: Repository, log: InfoLog, parsed: ParsedRef, tip: Commit
) -> str:
    name = parsed.canonical_name
    if parsed.is_local_branch:
        log.info(f"Creating local branch {name}")
    else:
        log.info(f"Creating local branch {name} pointing at {tip.id}")
    repository.references.add(name, tip.id)
    return name


def _update(
    repository: Repository,
    log: InfoLog,
    parsed: ParsedRef,
    tip: Commit,
    matched: Branch,
) -> str:
    name = parsed.canonical_name
    reference = repository.references.get(name)
    if reference is None:
        # Store is case-sensitive; keep the existing branch's spelling.
        logger.debug(
            f"No reference named {name}, using existing {matched.canonical_name}"
        )
        name = matched.canonical_name
        reference = repository.references.get(name)
        if reference is None:
            # Branch set and reference store disagree
            raise LookupError(f"Reference {name} not found")

    if parsed.is_local_branch:
        log.info(f"Updating local branch {name} to match ref {parsed.raw}")
    else:
        log.info(f"Updating local branch {name} to point at {tip.sha}")
    repository.references.update_target(reference, tip.id)
    return name


def ensure_local_branch(
    repository: Repository,
    log: InfoLog | None,
    remote: Remote | None,
    current_branch: str | None,
) -> ReconcileResult | None:
    """Make sure a local branch exists for ``current_branch`` and check it out.

    Args:
        repository: Repository to reconcile
        log: Receives one informational record describing the mutation
        remote: Remote whose tracking branch is preferred as the target
        current_branch: Branch identifier, e.g. ``main``,
            ``refs/heads/main`` or ``refs/pull/5/merge``

    Returns:
        The ReconcileResult, or None if ``current_branch`` is empty.

    Raises:
        MissingLogError: If ``log`` is None.
        MissingRemoteError: If ``remote`` is None.
    """
    if log is None:
        raise MissingLogError()
    if remote is None:
        raise MissingRemoteError()

    if not current_branch:
        return None

    parsed = parse_ref_name(current_branch)

    tip = resolve_tip(repository, current_branch, remote)

    matched = find_branch(repository.branches, parsed.canonical_name)
    if matched is None:
        name = _create(repository, log, parsed, tip)
        action = ReconcileAction.CREATED
    else:
        name = _update(repository, log, parsed, tip, matched)
        action = ReconcileAction.UPDATED

    checkout_branch(repository, name)

    return ReconcileResult(canonical_name=name, action=action, target=tip)
