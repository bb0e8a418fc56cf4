"""Git-backed repository for branch reconciliation."""

import logging
import subprocess
from pathlib import Path

from branchsync.models.repository import (
    LOCAL_BRANCH_PREFIX,
    REMOTE_BRANCH_PREFIX,
    Branch,
    BranchCollection,
    Commit,
    ObjectId,
    Reference,
    Remote,
)

logger = logging.getLogger(__name__)

DETACHED_HEAD = "HEAD"


class GitError(Exception):
    """Exception raised for Git operation errors."""

    pass


class GitReferenceStore:
    """Reference store backed by ``git for-each-ref`` and ``git update-ref``."""

    def __init__(self, repository: "GitRepository") -> None:
        self._repository = repository

    def get(self, name: str) -> Reference | None:
        """Look up a reference by its exact canonical name."""
        result = self._repository._run_git(
            ["for-each-ref", "--format=%(objectname) %(refname)", name]
        )
        for line in result.stdout.splitlines():
            sha, _, refname = line.partition(" ")
            # for-each-ref also matches refs below ``name``
            if refname == name:
                return Reference(canonical_name=refname, target=ObjectId(sha))
        return None

    def __getitem__(self, name: str) -> Reference | None:
        return self.get(name)

    def add(self, name: str, target_id: ObjectId) -> Reference:
        """Create a reference. Fails if one with the same name exists."""
        # An empty old value makes git refuse to overwrite
        self._repository._run_git(
            ["update-ref", "-m", "branchsync: create", name, target_id.sha, ""]
        )
        logger.debug(f"Created {name} at {target_id.short}")
        return Reference(canonical_name=name, target=target_id)

    def update_target(self, reference: Reference, target_id: ObjectId) -> Reference:
        """Point an existing reference at a new object.

        When the reference is the branch HEAD is attached to, the index and
        working tree are moved along with it. Local changes that would be
        overwritten make this fail with GitError.
        """
        if reference.canonical_name == self._repository.attached_branch():
            self._repository._run_git(["reset", "-q", "--keep", target_id.sha])
        else:
            self._repository._run_git(
                [
                    "update-ref",
                    "-m",
                    "branchsync: update",
                    reference.canonical_name,
                    target_id.sha,
                ]
            )
        logger.debug(
            f"Updated {reference.canonical_name} "
            f"{reference.target.short} -> {target_id.short}"
        )
        return Reference(canonical_name=reference.canonical_name, target=target_id)


class GitRepository:
    """Repository handle that drives the ``git`` executable."""

    def __init__(self, path: Path, git_command: str = "git") -> None:
        self.path = path
        self.git_command = git_command
        self._references = GitReferenceStore(self)

    @classmethod
    def open(cls, path: Path, git_command: str = "git") -> "GitRepository":
        """Open the repository at ``path``.

        Raises:
            GitError: If ``path`` is not inside a Git repository.
        """
        repo = cls(path, git_command=git_command)
        if not repo.is_git_repository():
            raise GitError(f"Not a Git repository: {path}")
        repo.path = Path(
            repo._run_git(["rev-parse", "--show-toplevel"]).stdout.strip()
        )
        return repo

    def _run_git(
        self, args: list[str], check: bool = True
    ) -> subprocess.CompletedProcess:
        """Run a git command and return the result."""
        cmd = [self.git_command] + args
        try:
            result = subprocess.run(
                cmd,
                cwd=self.path,
                capture_output=True,
                text=True,
                check=check,
            )
            return result
        except subprocess.CalledProcessError as e:
            error_msg = e.stderr.strip() if e.stderr else str(e)
            raise GitError(f"Git command failed: {error_msg}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def is_git_repository(self) -> bool:
        """Check if the path is a Git repository."""
        try:
            result = self._run_git(["rev-parse", "--git-dir"], check=False)
            return result.returncode == 0
        except GitError:
            return False

    def attached_branch(self) -> str | None:
        """Return the canonical name of the branch HEAD is on, or None."""
        result = self._run_git(["symbolic-ref", "-q", "HEAD"], check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    @property
    def head(self) -> Branch:
        """Return HEAD as a branch; detached HEAD is named ``HEAD``."""
        name = self.attached_branch() or DETACHED_HEAD
        sha = self._run_git(["rev-parse", "--verify", "HEAD^{commit}"]).stdout
        return Branch(canonical_name=name, tip=Commit(ObjectId(sha.strip())))

    @property
    def branches(self) -> BranchCollection:
        """Return local and remote-tracking branches."""
        result = self._run_git(
            [
                "for-each-ref",
                "--format=%(objectname) %(refname)",
                LOCAL_BRANCH_PREFIX.rstrip("/"),
                REMOTE_BRANCH_PREFIX.rstrip("/"),
            ]
        )

        branches = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            sha, _, refname = line.partition(" ")
            is_remote = refname.startswith(REMOTE_BRANCH_PREFIX)
            # Skip origin/HEAD style symbolic refs
            if is_remote and refname.endswith("/HEAD"):
                continue
            branches.append(
                Branch(
                    canonical_name=refname,
                    tip=Commit(ObjectId(sha)),
                    is_remote=is_remote,
                )
            )
        return BranchCollection(branches)

    @property
    def references(self) -> GitReferenceStore:
        return self._references

    @property
    def remotes(self) -> list[Remote]:
        """Return configured remotes with their fetch URLs."""
        result = self._run_git(["remote", "-v"])

        remotes: dict[str, Remote] = {}
        for line in result.stdout.splitlines():
            # origin\thttps://example.com/repo.git (fetch)
            name, _, rest = line.partition("\t")
            url, _, kind = rest.rpartition(" ")
            if kind == "(fetch)" and name not in remotes:
                remotes[name] = Remote(name=name, url=url)
        return list(remotes.values())

    def get_remote(self, name: str) -> Remote | None:
        """Find a configured remote by name."""
        for remote in self.remotes:
            if remote.name == name:
                return remote
        return None

    def current_branch_name(self) -> str:
        """Get the current branch name (``HEAD`` when detached)."""
        result = self._run_git(["rev-parse", "--abbrev-ref", "HEAD"])
        return result.stdout.strip()

    def checkout(self, canonical_name: str) -> None:
        """Switch the working copy to a reference.

        Local branches are checked out by short name so HEAD stays attached;
        anything else results in a detached HEAD.
        """
        if canonical_name.startswith(LOCAL_BRANCH_PREFIX):
            args = ["checkout", canonical_name[len(LOCAL_BRANCH_PREFIX):], "--"]
        else:
            args = ["checkout", "--detach", canonical_name, "--"]
        self._run_git(args)
        logger.debug(f"Checked out {canonical_name}")
