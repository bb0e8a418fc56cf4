"""Detect the current branch name from CI environment variables."""

import logging
import os
from collections.abc import Iterable, Mapping

from branchsync.models.config import DEFAULT_BRANCH_ENV_VARS

logger = logging.getLogger(__name__)


def detect_branch(
    env: Mapping[str, str] | None = None,
    variables: Iterable[str] | None = None,
) -> str | None:
    """Return the branch reported by the CI system, if any.

    Variables are checked in order and the first non-empty value wins.
    Empty values are skipped; GitHub Actions sets ``GITHUB_HEAD_REF`` to
    an empty string outside of pull requests.

    Args:
        env: Environment to read, defaults to ``os.environ``
        variables: Variable names to check, defaults to
            ``DEFAULT_BRANCH_ENV_VARS``
    """
    if env is None:
        env = os.environ
    if variables is None:
        variables = DEFAULT_BRANCH_ENV_VARS

    for name in variables:
        value = env.get(name, "").strip()
        if value:
            logger.debug(f"Branch {value!r} taken from {name}")
            return value
    return None
