"""Classification and normalization of branch identifiers."""

from dataclasses import dataclass
from enum import Enum

from branchsync.models.repository import LOCAL_BRANCH_PREFIX

REFS_SEGMENT = "refs"
HEADS_SEGMENT = "heads"


class RefKind(Enum):
    """Shape of a branch identifier."""

    SHORT_NAME = "short"  # main, feature/x
    LOCAL_BRANCH = "local"  # refs/heads/main
    OTHER_NAMESPACE = "other"  # refs/pull/5/merge, refs/tags/v1


@dataclass(frozen=True)
class ParsedRef:
    """A branch identifier split into its kind and the path below it."""

    raw: str
    kind: RefKind
    # Path relative to refs/heads/ once normalized
    branch_path: str

    @property
    def canonical_name(self) -> str:
        """Return the canonical local branch reference name."""
        if self.kind is RefKind.LOCAL_BRANCH:
            return self.raw
        return LOCAL_BRANCH_PREFIX + self.branch_path

    @property
    def is_local_branch(self) -> bool:
        return self.kind is RefKind.LOCAL_BRANCH


def parse_ref_name(identifier: str) -> ParsedRef:
    """Parse a branch identifier into a ParsedRef.

    Classification looks at whole path segments, so ``myrefs/x`` or
    ``feature/refs-cleanup`` are short names, while ``refs/heads/x`` is a
    local branch and ``refs/pull/1/merge`` is a ref in another namespace.

    Raises:
        ValueError: If the identifier is empty.
    """
    if not identifier:
        raise ValueError("Branch identifier must not be empty")

    segments = identifier.split("/")
    if segments[0] != REFS_SEGMENT or len(segments) == 1:
        return ParsedRef(identifier, RefKind.SHORT_NAME, identifier)

    if segments[1] == HEADS_SEGMENT and len(segments) > 2:
        return ParsedRef(identifier, RefKind.LOCAL_BRANCH, "/".join(segments[2:]))

    return ParsedRef(identifier, RefKind.OTHER_NAMESPACE, "/".join(segments[1:]))


def normalize_ref_name(identifier: str) -> str:
    """Return the canonical local reference name for a branch identifier."""
    return parse_ref_name(identifier).canonical_name
