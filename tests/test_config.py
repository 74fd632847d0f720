"""
tests/test_config.py — YAML Config & Session Secret Validation
===============================================================
Verifies that the API refuses to start when CLOVER_SESSION_SECRET is
missing, blank, too short, or a known weak default, and that
``config.yaml`` is parsed into a typed settings object.
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from clover.config import (
    CloverConfig,
    config_path_from_env,
    load_config,
    load_session_secret,
)
from clover.constants import DEFAULT_AVATAR_BASE_URL


def _write(tmp_path, text: str):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_full_file(self, tmp_path):
        path = _write(tmp_path, (
            "community_name: Clover Sports\n"
            "session_slot_path: data/session.jwt\n"
            "seed_sample_data: true\n"
            "seed_password: sample-pass\n"
            "avatar_base_url: https://avatars.example.com/?u=\n"
            "api_port: 9000\n"
            "notice_capacity: 50\n"
        ))
        cfg = load_config(path)
        assert cfg == CloverConfig(
            community_name="Clover Sports",
            session_slot_path="data/session.jwt",
            seed_sample_data=True,
            seed_password="sample-pass",
            avatar_base_url="https://avatars.example.com/?u=",
            api_port=9000,
            notice_capacity=50,
        )

    def test_optional_keys_default(self, tmp_path):
        path = _write(tmp_path, (
            "community_name: Clover\n"
            "session_slot_path: s.jwt\n"
            "seed_sample_data: false\n"
        ))
        cfg = load_config(path)
        assert cfg.seed_password is None
        assert cfg.avatar_base_url == DEFAULT_AVATAR_BASE_URL
        assert cfg.api_port == 8000
        assert cfg.notice_capacity == 200

    def test_missing_file_has_hint(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="config.yaml.example"):
            load_config(tmp_path / "absent.yaml")

    def test_missing_required_key(self, tmp_path):
        path = _write(tmp_path, "community_name: Clover\n")
        with pytest.raises(KeyError):
            load_config(path)

    def test_config_is_frozen(self, tmp_path):
        path = _write(tmp_path, (
            "community_name: Clover\n"
            "session_slot_path: s.jwt\n"
            "seed_sample_data: false\n"
        ))
        cfg = load_config(path)
        with pytest.raises(AttributeError):
            cfg.api_port = 1

    def test_path_from_env(self):
        with patch.dict(os.environ, {"CLOVER_CONFIG": "/etc/clover.yaml"}):
            assert str(config_path_from_env()) == "/etc/clover.yaml"
        with patch.dict(os.environ, {"CLOVER_CONFIG": "  "}):
            assert str(config_path_from_env()) == "config.yaml"


class TestSessionSecretValidation:
    """Prove that load_session_secret() rejects bad secrets and accepts good ones."""

    def test_rejects_missing_secret(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("CLOVER_SESSION_SECRET", None)
            with pytest.raises(RuntimeError, match="environment variable is not set"):
                load_session_secret()

    def test_rejects_empty_secret(self):
        with patch.dict(os.environ, {"CLOVER_SESSION_SECRET": ""}):
            with pytest.raises(RuntimeError, match="environment variable is not set"):
                load_session_secret()

    def test_rejects_known_weak_default(self):
        with patch.dict(os.environ, {"CLOVER_SESSION_SECRET": "clover-dev-secret-change-me"}):
            with pytest.raises(RuntimeError, match="known weak default"):
                load_session_secret()

    def test_rejects_short_secret(self):
        with patch.dict(os.environ, {"CLOVER_SESSION_SECRET": "tooshort"}):
            with pytest.raises(RuntimeError, match="too short"):
                load_session_secret()

    def test_accepts_strong_secret(self):
        good_secret = "a" * 64
        with patch.dict(os.environ, {"CLOVER_SESSION_SECRET": good_secret}):
            assert load_session_secret() == good_secret
