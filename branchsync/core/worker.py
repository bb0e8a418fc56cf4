"""Background reconciliation for Qt applications."""

import logging
from pathlib import Path

from PySide6.QtCore import QObject, QThread, Signal

from branchsync.models.repository import Remote

from .git_service import GitError, GitRepository
from .reconciler import ReconcileResult, ensure_local_branch
from .utils import safe_slot

logger = logging.getLogger(__name__)


class _SignalLog:
    """InfoLog that logs and forwards each record to a progress signal."""

    def __init__(self, signal) -> None:
        self._signal = signal

    def info(self, msg: str) -> None:
        logger.info(msg)
        self._signal.emit(msg)


class ReconcileWorker(QThread):
    """Worker thread that reconciles one branch."""

    completed = Signal(bool, str)  # success, message
    progress = Signal(str)  # log record

    def __init__(
        self,
        repo_path: Path,
        branch: str,
        remote_name: str = "origin",
        git_command: str = "git",
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._repo_path = repo_path
        self._branch = branch
        self._remote_name = remote_name
        self._git_command = git_command
        self.result: ReconcileResult | None = None

    def run(self) -> None:
        """Run the reconciliation in background thread."""
        try:
            repo = GitRepository.open(self._repo_path, git_command=self._git_command)
            self.result = ensure_local_branch(
                repo,
                _SignalLog(self.progress),
                Remote(self._remote_name),
                self._branch,
            )
            if self.result is None:
                self.completed.emit(True, "No branch to reconcile")
                return

            self.completed.emit(
                True,
                f"{self.result.action.value.capitalize()} "
                f"{self.result.canonical_name} at {self.result.target.id.short}",
            )

        except GitError as e:
            self.completed.emit(False, f"Git error: {e}")
        except Exception as e:
            self.completed.emit(False, f"Error: {e}")


class ReconcileService(QObject):
    """Runs reconciliations, at most one at a time per repository."""

    # Signals
    reconcile_started = Signal(Path)  # repo_path
    reconcile_progress = Signal(Path, str)  # repo_path, message
    reconcile_finished = Signal(Path, bool, str)  # repo_path, success, message

    def __init__(
        self,
        remote_name: str = "origin",
        git_command: str = "git",
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._remote_name = remote_name
        self._git_command = git_command
        self._workers: dict[Path, ReconcileWorker] = {}

    def reconcile(self, repo_path: Path, branch: str) -> ReconcileResult | None:
        """Reconcile synchronously, logging through the module logger."""
        repo = GitRepository.open(repo_path, git_command=self._git_command)
        remote = repo.get_remote(self._remote_name) or Remote(self._remote_name)
        return ensure_local_branch(repo, logger, remote, branch)

    def reconcile_async(
        self, repo_path: Path, branch: str
    ) -> ReconcileWorker | None:
        """Reconcile in a background thread.

        Connect to reconcile_finished to handle completion.

        Returns:
            The started worker, or None if this repository is already
            being reconciled.
        """
        if repo_path in self._workers:
            logger.debug(f"Reconciliation already running for {repo_path}")
            return None

        worker = ReconcileWorker(
            repo_path=repo_path,
            branch=branch,
            remote_name=self._remote_name,
            git_command=self._git_command,
            parent=self,
        )

        # Connect worker signals
        worker.completed.connect(
            lambda success, msg: self._on_completed(repo_path, success, msg)
        )
        worker.progress.connect(lambda msg: self._on_progress(repo_path, msg))
        # QThread.finished fires after run() returns
        worker.finished.connect(lambda: self._on_thread_finished(repo_path))
        worker.finished.connect(worker.deleteLater)

        self._workers[repo_path] = worker
        self.reconcile_started.emit(repo_path)
        worker.start()
        return worker

    @safe_slot
    def _on_completed(self, repo_path: Path, success: bool, message: str) -> None:
        """Handle reconciliation completion."""
        self.reconcile_finished.emit(repo_path, success, message)

    @safe_slot
    def _on_thread_finished(self, repo_path: Path) -> None:
        self._workers.pop(repo_path, None)

    @safe_slot
    def _on_progress(self, repo_path: Path, message: str) -> None:
        self.reconcile_progress.emit(repo_path, message)

    def is_reconciling(self, repo_path: Path) -> bool:
        """Check if a repository is currently being reconciled."""
        return repo_path in self._workers
