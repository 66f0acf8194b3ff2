"""Configuration loading and validation."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field, ValidationError, field_validator

from repo_archiver.github.auth import AuthenticationError, GitHubAuth
from repo_archiver.policy import DEFAULT_STALE_MONTHS

USERNAME_ENV_VARS = ("MY_GITHUB_USERNAME", "GITHUB_USERNAME")
TOKEN_ENV_VARS = ("MY_GITHUB_TOKEN", "GITHUB_TOKEN")
STALE_MONTHS_ENV_VAR = "STALE_MONTHS"
LOG_DIR_ENV_VAR = "ARCHIVE_LOG_DIR"
WEBHOOK_ENV_VARS = (
    ("DISCORD_WEBHOOK_URL", "discord"),
    ("SLACK_WEBHOOK_URL", "slack"),
)

DISCORD_HOSTS = ("discord.com", "discordapp.com")
SECTIONS = ("github", "policy", "notification", "storage")


class ConfigError(Exception):
    """Raised when configuration is invalid or missing required fields."""


class GitHubConfig(BaseModel):
    """GitHub account and API configuration."""

    username: str = Field(min_length=1)
    token: str = Field(min_length=1, repr=False)
    base_url: str = "https://api.github.com"
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        """Validate token format."""
        try:
            return GitHubAuth(v).token
        except AuthenticationError as e:
            raise ValueError(str(e)) from e


class PolicyConfig(BaseModel):
    """Staleness policy configuration."""

    stale_months: int = Field(default=DEFAULT_STALE_MONTHS, ge=0)


class NotificationConfig(BaseModel):
    """Outbound webhook configuration."""

    webhook_url: str | None = None
    platform: str = Field(default="auto", pattern=r"^(auto|discord|slack)$")
    timeout: float = Field(default=10.0, gt=0)

    @property
    def enabled(self) -> bool:
        """True when a webhook endpoint is configured."""
        return bool(self.webhook_url)

    def resolved_platform(self) -> str:
        """Return the payload style to use for the configured webhook."""
        if self.platform != "auto":
            return self.platform
        host = urlparse(self.webhook_url or "").hostname or ""
        if host in DISCORD_HOSTS or host.endswith(tuple(f".{h}" for h in DISCORD_HOSTS)):
            return "discord"
        return "slack"


class StorageConfig(BaseModel):
    """Log file locations and formatting."""

    root: Path = Field(default=Path("."))
    table_file: str = "ARCHIVED_REPOS.md"
    record_file: str = "archive_log.json"
    date_format: str = "%x"


class Config(BaseModel):
    """Root configuration model."""

    github: GitHubConfig
    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    notification: NotificationConfig = Field(default_factory=NotificationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)


def _first(env: Mapping[str, str | None], names: tuple[str, ...]) -> str | None:
    for name in names:
        value = env.get(name)
        if value:
            return value
    return None


def _normalize_sections(raw: dict[str, Any], source: Path | None) -> None:
    """Replace empty sections with mappings and reject any other shape."""
    for name in SECTIONS:
        section = raw.get(name)
        if section is None:
            raw[name] = {}
        elif not isinstance(section, dict):
            msg = f"Section '{name}' in {source} must be a mapping"
            raise ConfigError(msg)


def _apply_environment(raw: dict[str, Any], env: Mapping[str, str | None]) -> None:
    """Overlay environment variables onto the raw config document.

    Expects every section in ``SECTIONS`` to already be a mapping.
    """
    github = raw["github"]
    username = _first(env, USERNAME_ENV_VARS)
    if username:
        github["username"] = username
    token = _first(env, TOKEN_ENV_VARS)
    if token:
        github["token"] = token

    stale_months = env.get(STALE_MONTHS_ENV_VAR)
    if stale_months:
        try:
            raw["policy"]["stale_months"] = int(stale_months)
        except ValueError as e:
            msg = f"{STALE_MONTHS_ENV_VAR} must be an integer, got {stale_months!r}"
            raise ConfigError(msg) from e

    for name, platform in WEBHOOK_ENV_VARS:
        url = env.get(name)
        if url:
            raw["notification"].update(webhook_url=url, platform=platform)
            break

    log_dir = env.get(LOG_DIR_ENV_VAR)
    if log_dir:
        raw["storage"]["root"] = log_dir


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    dotenv_path: Path | None = None,
) -> Config:
    """Load and validate configuration.

    Sources, lowest precedence first:
    1. Optional YAML file at ``path``.
    2. Values from a ``.env`` file, consulted only when the username or
       token is missing from the environment.
    3. Process environment variables.

    Args:
        path: Optional YAML configuration file.
        environ: Environment mapping. Defaults to ``os.environ``.
        dotenv_path: Explicit .env file. Defaults to searching from the
            current directory.

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If the file is missing, a required value is absent, or
            any value fails validation.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg)
        with path.open() as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            msg = f"Config file {path} must contain a mapping"
            raise ConfigError(msg)
        raw = loaded
    _normalize_sections(raw, path)

    env: dict[str, str | None] = dict(os.environ if environ is None else environ)
    if not _first(env, USERNAME_ENV_VARS) or not _first(env, TOKEN_ENV_VARS):
        dotenv_file = dotenv_path if dotenv_path is not None else Path.cwd() / ".env"
        env = {**dotenv_values(dotenv_file), **env}

    _apply_environment(raw, env)

    github = raw["github"]
    if not github.get("username") or not github.get("token"):
        msg = (
            "Please set MY_GITHUB_USERNAME and MY_GITHUB_TOKEN in the environment "
            "or in a .env file."
        )
        raise ConfigError(msg)

    try:
        return Config.model_validate(raw)
    except ValidationError as e:
        # include_input=False keeps the token out of the message
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors(include_input=False)
        )
        msg = f"Invalid configuration: {problems}"
        raise ConfigError(msg) from e
