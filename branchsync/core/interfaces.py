"""Capabilities the reconciler needs from its collaborators.

Implementations conform structurally; see ``GitRepository`` for the
git-backed one.
"""

from typing import Protocol

from branchsync.models.repository import Branch, BranchCollection, ObjectId, Reference


class InfoLog(Protocol):
    """Anything that can record an informational message.

    ``logging.Logger`` satisfies this.
    """

    def info(self, msg: str, /) -> None: ...


class ReferenceStore(Protocol):
    """Named references keyed by canonical name."""

    def get(self, name: str) -> Reference | None: ...

    def __getitem__(self, name: str) -> Reference | None: ...

    def add(self, name: str, target_id: ObjectId) -> Reference: ...

    def update_target(self, reference: Reference, target_id: ObjectId) -> Reference: ...


class Repository(Protocol):
    """Repository handle used for one reconciliation."""

    @property
    def head(self) -> Branch: ...

    @property
    def branches(self) -> BranchCollection: ...

    @property
    def references(self) -> ReferenceStore: ...

    def checkout(self, canonical_name: str) -> None: ...
