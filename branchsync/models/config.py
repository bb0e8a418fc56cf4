"""Tool configuration management."""

import json
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_REMOTE = "origin"
DEFAULT_GIT_COMMAND = "git"

# Checked in order, first non-empty value wins.
DEFAULT_BRANCH_ENV_VARS = [
    "GITHUB_HEAD_REF",
    "GITHUB_REF",
    "BUILD_SOURCEBRANCH",
    "CI_COMMIT_REF_NAME",
    "BITBUCKET_BRANCH",
    "BUILDKITE_BRANCH",
    "CIRCLE_BRANCH",
    "TRAVIS_BRANCH",
    "BRANCH_NAME",
    "GIT_BRANCH",
]


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_dir = Path.home() / ".config" / "branchsync"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file() -> Path:
    """Get the main configuration file path."""
    return get_config_dir() / "config.json"


@dataclass
class SyncConfig:
    """Branch synchronization configuration."""

    remote: str = DEFAULT_REMOTE
    git_command: str = DEFAULT_GIT_COMMAND
    branch_env_vars: list[str] = field(
        default_factory=lambda: list(DEFAULT_BRANCH_ENV_VARS)
    )

    # Optional file receiving a copy of the log output
    log_file: str | None = None

    def save(self, config_file: Path | None = None) -> None:
        """Save configuration to file."""
        config_file = config_file or get_config_file()
        with open(config_file, "w") as f:
            json.dump(self._to_dict(), f, indent=2)

    def _to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "git": {
                "remote": self.remote,
                "command": self.git_command,
            },
            "ci": {
                "branch_env_vars": self.branch_env_vars,
            },
            "logging": {
                "file": self.log_file,
            },
        }

    @classmethod
    def load(cls, config_file: Path | None = None) -> "SyncConfig":
        """Load configuration from file."""
        config_file = config_file or get_config_file()
        if not config_file.exists():
            return cls()

        try:
            with open(config_file) as f:
                data = json.load(f)
            return cls._from_dict(data)
        except (json.JSONDecodeError, KeyError, AttributeError):
            return cls()

    @classmethod
    def _from_dict(cls, data: dict) -> "SyncConfig":
        """Create from dictionary."""
        git = data.get("git", {})
        ci = data.get("ci", {})
        logging_ = data.get("logging", {})

        return cls(
            remote=git.get("remote", DEFAULT_REMOTE),
            git_command=git.get("command", DEFAULT_GIT_COMMAND),
            branch_env_vars=ci.get("branch_env_vars", list(DEFAULT_BRANCH_ENV_VARS)),
            log_file=logging_.get("file"),
        )
