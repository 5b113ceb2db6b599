"""Tests for gpt_auto_test/llm/doctor.py - Configuration validation."""

import os
from unittest.mock import patch

import yaml

from gpt_auto_test.llm.config import BackendConfig
from gpt_auto_test.llm.doctor import check_backend, check_config


class TestCheckBackend:
    """Test backend validation."""

    def test_available_backend(self):
        cfg = BackendConfig(backend_id="chat", type="chat", api_key_env="DOCTOR_KEY")
        with patch.dict(os.environ, {"DOCTOR_KEY": "k"}):
            result = check_backend(cfg)
        assert result["available"] is True
        assert result["error"] is None

    def test_missing_api_key(self):
        cfg = BackendConfig(backend_id="chat", type="chat", api_key_env="MISSING_DOCTOR_KEY")
        with patch.dict(os.environ, {}, clear=True):
            result = check_backend(cfg)
        assert result["available"] is False
        assert "MISSING_DOCTOR_KEY" in result["error"]

    def test_unknown_type(self):
        cfg = BackendConfig(backend_id="odd", type="grpc")
        result = check_backend(cfg)
        assert result["available"] is False
        assert "not found" in result["error"]


class TestCheckConfig:
    """Test whole-config validation."""

    def test_defaults_valid_with_key(self):
        with patch.dict(os.environ, {"OPENAI_API_KEY": "k"}):
            result = check_config(None)
        assert result["valid"] is True
        assert result["roles"] == {"implementer": "chat", "tester": "chat"}
        assert set(result["backends"]) == {"chat", "text"}

    def test_defaults_invalid_without_key(self):
        with patch.dict(os.environ, {}, clear=True):
            result = check_config(None)
        assert result["valid"] is False
        assert any("OPENAI_API_KEY" in e for e in result["errors"])

    def test_missing_file(self, tmp_path):
        result = check_config(str(tmp_path / "missing.yaml"))
        assert result["valid"] is False
        assert "not found" in result["errors"][0]

    def test_unused_backend_is_warning(self, tmp_path):
        path = tmp_path / "llm.yaml"
        path.write_text(yaml.dump({
            "llm": {
                "default_backend": "chat",
                "backends": {
                    "chat": {"type": "chat", "api_key_env": "SET_KEY"},
                    "legacy": {"type": "text", "api_key_env": "UNSET_KEY"},
                },
                "roles": {"implementer": {"backend": "chat"}},
            }
        }))
        with patch.dict(os.environ, {"SET_KEY": "k"}, clear=True):
            result = check_config(str(path))
        assert result["valid"] is True
        assert any("legacy" in w for w in result["warnings"])
        assert any("'tester' not mapped" in w for w in result["warnings"])
