"""Repository, branch and reference data models."""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

LOCAL_BRANCH_PREFIX = "refs/heads/"
REMOTE_BRANCH_PREFIX = "refs/remotes/"

_SHA_PATTERN = re.compile(r"^(?:[0-9a-f]{40}|[0-9a-f]{64})$")


@dataclass(frozen=True)
class ObjectId:
    """A content-addressed object identifier (SHA-1 or SHA-256)."""

    sha: str

    def __post_init__(self) -> None:
        normalized = self.sha.strip().lower()
        if not _SHA_PATTERN.match(normalized):
            raise ValueError(f"Invalid object id: {self.sha!r}")
        object.__setattr__(self, "sha", normalized)

    @property
    def short(self) -> str:
        """Return abbreviated sha."""
        return self.sha[:7]

    def __str__(self) -> str:
        return self.sha


@dataclass(frozen=True)
class Commit:
    """Represents a commit by its identifier."""

    id: ObjectId

    @property
    def sha(self) -> str:
        return self.id.sha


@dataclass(frozen=True)
class Remote:
    """Represents a configured remote."""

    name: str
    url: str | None = None


@dataclass
class Reference:
    """A named pointer to an object id."""

    canonical_name: str
    target: ObjectId


@dataclass
class Branch:
    """Represents a local or remote-tracking branch."""

    canonical_name: str
    tip: Commit
    is_remote: bool = False

    @property
    def friendly_name(self) -> str:
        """Return the short display name (``main``, ``origin/main``)."""
        for prefix in (LOCAL_BRANCH_PREFIX, REMOTE_BRANCH_PREFIX):
            if self.canonical_name.startswith(prefix):
                return self.canonical_name[len(prefix):]
        return self.canonical_name

    @property
    def remote_name(self) -> str | None:
        """Return the remote part of a remote-tracking branch name."""
        if not self.is_remote:
            return None
        return self.friendly_name.split("/", 1)[0]


@dataclass
class BranchCollection:
    """Branch set of a repository, iterable and indexable by name."""

    branches: list[Branch] = field(default_factory=list)

    def __iter__(self) -> Iterator[Branch]:
        return iter(self.branches)

    def __len__(self) -> int:
        return len(self.branches)

    def get(self, name: str) -> Branch | None:
        """Find a branch by exact name.

        The name is tried as a canonical name first, then as a local
        branch short name and finally as a remote-tracking display name
        (``origin/main``). Matching is case-sensitive.
        """
        candidates = (name, LOCAL_BRANCH_PREFIX + name, REMOTE_BRANCH_PREFIX + name)
        for candidate in candidates:
            for branch in self.branches:
                if branch.canonical_name == candidate:
                    return branch
        return None

    def __getitem__(self, name: str) -> Branch | None:
        return self.get(name)
