#!/usr/bin/env python3
"""Main entry point for the branchsync command."""

import argparse
import logging
import sys
from pathlib import Path

from branchsync.core.ci import detect_branch
from branchsync.core.git_service import GitError, GitRepository
from branchsync.core.reconciler import ensure_local_branch
from branchsync.models.config import SyncConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

EXIT_OK = 0
EXIT_GIT_ERROR = 1
EXIT_USAGE = 2

logger = logging.getLogger("branchsync")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="branchsync",
        description="Create or update a local branch for the CI branch and check it out",
    )
    parser.add_argument(
        "repository",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Path to a Git repository (defaults to current directory)",
    )
    parser.add_argument(
        "-b",
        "--branch",
        help="Branch identifier (defaults to the CI environment)",
    )
    parser.add_argument(
        "-r",
        "--remote",
        help="Remote whose tracking branch is preferred (defaults to config, then origin)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write log output to this file",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (defaults to ~/.config/branchsync/config.json)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def setup_logging(verbose: bool, log_file: Path | None) -> logging.Handler | None:
    """Configure console logging and an optional log file.

    Returns the file handler so the caller can close it.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)

    if log_file is None:
        return None

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return handler


def run(args: argparse.Namespace, config: SyncConfig) -> int:
    """Reconcile the branch and return an exit code."""
    branch = args.branch or detect_branch(variables=config.branch_env_vars)
    if not branch:
        logger.error(
            "No branch given and none found in: " + ", ".join(config.branch_env_vars)
        )
        return EXIT_USAGE

    remote_name = args.remote or config.remote

    try:
        repo = GitRepository.open(args.repository, git_command=config.git_command)

        remote = repo.get_remote(remote_name)
        if remote is None:
            logger.error(f"Remote '{remote_name}' is not configured")
            return EXIT_USAGE

        result = ensure_local_branch(repo, logger, remote, branch)
    except (GitError, LookupError) as e:
        logger.error(str(e))
        return EXIT_GIT_ERROR

    if result is not None:
        logger.info(f"Checked out {result.canonical_name} at {result.target.id.short}")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    config = SyncConfig.load(args.config)

    log_file = args.log_file or (Path(config.log_file) if config.log_file else None)
    file_handler = setup_logging(args.verbose, log_file)
    try:
        return run(args, config)
    finally:
        if file_handler is not None:
            logger.removeHandler(file_handler)
            file_handler.close()


if __name__ == "__main__":
    sys.exit(main())
