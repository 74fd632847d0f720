"""
clover.config — YAML Configuration Loader
==========================================

**Why this file exists:**
This module reads ``config.yaml`` for the non-secret settings of a Clover
process (community identity, where the session slot lives, whether to load
the sample community, API port).  Secrets come from the environment
(``.env`` via python-dotenv) and are validated by
:func:`load_session_secret`.

Usage::

    from clover.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.community_name)    # "Clover Sports"
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from clover.constants import DEFAULT_AVATAR_BASE_URL

CONFIG_ENV_VAR = "CLOVER_CONFIG"
SECRET_ENV_VAR = "CLOVER_SESSION_SECRET"

_WEAK_SECRETS = frozenset({
    "clover-dev-secret-change-me",
    "change-me",
    "secret",
    "dev",
    "",
})

_MIN_SECRET_LENGTH = 32


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class CloverConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    community_name: str

    # Session
    session_slot_path: str  # File holding the persisted session

    # Startup data
    seed_sample_data: bool
    seed_password: str | None = None  # Login password for the sample members

    # Presentation
    avatar_base_url: str = DEFAULT_AVATAR_BASE_URL

    # API
    api_port: int = 8000
    notice_capacity: int = 200


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def config_path_from_env(default: str = "config.yaml") -> Path:
    """Config path from ``CLOVER_CONFIG``, or *default*."""
    return Path(os.getenv(CONFIG_ENV_VAR, "").strip() or default)


def load_config(path: str | Path = "config.yaml") -> CloverConfig:
    """Read *path* and return a :class:`CloverConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    return CloverConfig(
        community_name=raw["community_name"],
        session_slot_path=str(raw["session_slot_path"]),
        seed_sample_data=bool(raw["seed_sample_data"]),
        seed_password=raw.get("seed_password") or None,
        avatar_base_url=raw.get("avatar_base_url") or DEFAULT_AVATAR_BASE_URL,
        api_port=int(raw.get("api_port", 8000)),
        notice_capacity=int(raw.get("notice_capacity", 200)),
    )


def load_session_secret() -> str:
    """Load and validate ``CLOVER_SESSION_SECRET`` from the environment.

    Raises RuntimeError if the secret is missing, blank, too short
    (< 32 chars), or a known weak default.
    """
    secret = os.getenv(SECRET_ENV_VAR, "")
    if not secret:
        raise RuntimeError(
            f"{SECRET_ENV_VAR} environment variable is not set. "
            "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(64))\""
        )
    if secret in _WEAK_SECRETS:
        raise RuntimeError(
            f"{SECRET_ENV_VAR} is set to a known weak default ('{secret}'). "
            "Please set a strong, unique secret."
        )
    if len(secret) < _MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"{SECRET_ENV_VAR} is too short ({len(secret)} chars). "
            f"Minimum length is {_MIN_SECRET_LENGTH} characters."
        )
    return secret
