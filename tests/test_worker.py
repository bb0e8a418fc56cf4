"""Tests for ReconcileWorker and ReconcileService."""

from collections.abc import Callable
from pathlib import Path

import pytest
from PySide6.QtCore import QCoreApplication

from branchsync.core.git_service import GitError
from branchsync.core.reconciler import ReconcileAction
from branchsync.core.worker import ReconcileService, ReconcileWorker


@pytest.fixture
def qapp():
    """Create a QCoreApplication for Qt tests."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


class TestReconcileWorker:
    """Tests for ReconcileWorker.run() executed in the test thread."""

    def test_success(self, qapp, ci_repo: Path, run_git: Callable) -> None:
        """Test signals emitted for a successful reconciliation."""
        worker = ReconcileWorker(ci_repo, "feature/login")
        completed = []
        progress = []
        worker.completed.connect(lambda ok, msg: completed.append((ok, msg)))
        worker.progress.connect(lambda msg: progress.append(msg))

        worker.run()

        assert len(completed) == 1
        ok, message = completed[0]
        assert ok is True
        assert message.startswith("Created refs/heads/feature/login at ")
        assert progress == [
            "Creating local branch refs/heads/feature/login pointing at "
            + run_git(ci_repo, "rev-parse", "refs/remotes/origin/feature/login")
        ]
        assert worker.result.action is ReconcileAction.CREATED

    def test_empty_branch(self, qapp, ci_repo: Path) -> None:
        """Test that an empty branch completes without changes."""
        worker = ReconcileWorker(ci_repo, "")
        completed = []
        worker.completed.connect(lambda ok, msg: completed.append((ok, msg)))

        worker.run()

        assert completed == [(True, "No branch to reconcile")]
        assert worker.result is None

    def test_git_error(self, qapp, temp_dir: Path) -> None:
        """Test that git failures are reported through the signal."""
        worker = ReconcileWorker(temp_dir, "main")
        completed = []
        worker.completed.connect(lambda ok, msg: completed.append((ok, msg)))

        worker.run()

        assert len(completed) == 1
        assert completed[0][0] is False
        assert "Not a Git repository" in completed[0][1]


class TestReconcileService:
    """Tests for ReconcileService."""

    def test_reconcile_sync(self, qapp, ci_repo: Path, run_git: Callable) -> None:
        """Test synchronous reconciliation."""
        service = ReconcileService()

        result = service.reconcile(ci_repo, "feature/login")

        assert result.canonical_name == "refs/heads/feature/login"
        assert run_git(ci_repo, "rev-parse", "--abbrev-ref", "HEAD") == "feature/login"

    def test_reconcile_sync_propagates_errors(self, qapp, temp_dir: Path) -> None:
        """Test that the synchronous path raises GitError."""
        with pytest.raises(GitError):
            ReconcileService().reconcile(temp_dir, "main")

    def test_duplicate_request_ignored(
        self, qapp, ci_repo: Path, monkeypatch
    ) -> None:
        """Test that a running repository is not reconciled twice."""
        monkeypatch.setattr(ReconcileWorker, "start", lambda self: None)
        service = ReconcileService()
        started = []
        service.reconcile_started.connect(lambda path: started.append(path))

        first = service.reconcile_async(ci_repo, "feature/login")
        second = service.reconcile_async(ci_repo, "feature/login")

        assert isinstance(first, ReconcileWorker)
        assert second is None
        assert started == [ci_repo]
        assert service.is_reconciling(ci_repo) is True

    def test_reconcile_async(self, qapp, ci_repo: Path, run_git: Callable) -> None:
        """Test reconciliation in a background thread."""
        service = ReconcileService()
        finished = []
        service.reconcile_finished.connect(
            lambda path, ok, msg: finished.append((path, ok, msg))
        )

        worker = service.reconcile_async(ci_repo, "feature/login")
        assert worker.wait(10000)
        qapp.processEvents()

        assert len(finished) == 1
        assert finished[0][:2] == (ci_repo, True)
        assert service.is_reconciling(ci_repo) is False
        assert run_git(ci_repo, "rev-parse", "--abbrev-ref", "HEAD") == "feature/login"

    def test_busy_until_thread_finishes(self, qapp, ci_repo: Path) -> None:
        """Test that the repository stays busy while the finished signal runs."""
        service = ReconcileService()
        during = []

        def on_finished(path, ok, msg):
            during.append(
                (
                    service.is_reconciling(path),
                    service.reconcile_async(path, "feature/login"),
                )
            )

        service.reconcile_finished.connect(on_finished)

        worker = service.reconcile_async(ci_repo, "feature/login")
        assert worker.wait(10000)
        qapp.processEvents()

        assert during == [(True, None)]
        assert service.is_reconciling(ci_repo) is False
