"""Tests for configuration loading."""

import json
from typing import Optional

import pytest

from k8s_advisor.config.config import Config
from k8s_advisor.utils.exceptions import ConfigError


class TestConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CAPABILITY_SEARCH_LIMIT", raising=False)
        config = Config()
        assert config.CAPABILITY_SEARCH_LIMIT == 50
        assert config.get("PATTERN_SEARCH_LIMIT") == 5
        assert config.embedding_config["dimensions"] == 1536

    def test_runtime_overrides_defaults(self, monkeypatch):
        monkeypatch.delenv("POLICY_SEARCH_LIMIT", raising=False)
        config = Config({"POLICY_SEARCH_LIMIT": 10})
        assert config.get("POLICY_SEARCH_LIMIT") == 10

    def test_environment_overrides_runtime(self, monkeypatch):
        monkeypatch.setenv("CAPABILITY_SEARCH_LIMIT", "25")
        monkeypatch.setenv("DEBUG_MODE", "true")
        config = Config({"CAPABILITY_SEARCH_LIMIT": 10})
        assert config.get("CAPABILITY_SEARCH_LIMIT") == 25
        assert config.get("DEBUG_MODE") is True

    @pytest.mark.parametrize("raw", ["none", "NULL", ""])
    def test_optional_env_value(self, monkeypatch, raw):
        monkeypatch.setenv("QDRANT_API_KEY", raw)
        assert Config().vector_db_config["api_key"] is None

    def test_optional_env_value_keeps_real_string(self, monkeypatch):
        monkeypatch.setenv("KUBECONFIG", "/etc/kube/config")
        assert Config().get("KUBECONFIG") == "/etc/kube/config"

    def test_optional_str_null_literal(self):
        assert Config.convert_env_value("KUBECONFIG", "null", Optional[str]) is None

    def test_vector_db_config(self, monkeypatch):
        monkeypatch.setenv("QDRANT_URL", "http://qdrant:6333")
        monkeypatch.setenv("QDRANT_PATTERNS_COLLECTION", "org-patterns")
        vector_db = Config().vector_db_config
        assert vector_db["url"] == "http://qdrant:6333"
        assert vector_db["collections"] == {
            "capabilities": "capabilities",
            "patterns": "org-patterns",
            "policies": "policies",
        }

    def test_set_llm_config(self, monkeypatch):
        monkeypatch.delenv("LLM_PROVIDER", raising=False)
        monkeypatch.delenv("LLM_MODEL", raising=False)
        config = Config()
        config.set_llm_config({"provider": "anthropic", "model": "claude-sonnet-4-5"})
        assert config.get_llm_config()["provider"] == "anthropic"
        assert config.llm_config["model"] == "claude-sonnet-4-5"

    def test_unknown_attribute(self):
        with pytest.raises(AttributeError):
            Config().NOT_A_KEY


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Configuration not found"):
            Config.load_config(str(tmp_path / "missing.json"))

    def test_non_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(["not", "an", "object"]))
        with pytest.raises(ConfigError, match="must contain a JSON object"):
            Config.load_config(str(path))

    def test_merges_with_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"PATTERN_SEARCH_LIMIT": 3}))
        merged = Config.load_config(str(path))
        assert merged["PATTERN_SEARCH_LIMIT"] == 3
        assert merged["KUBECTL_TIMEOUT"] == 30


class TestConvertEnvValue:
    def test_list(self):
        assert Config.convert_env_value("X", '["a", "b"]', list) == ["a", "b"]

    def test_unsupported_type(self):
        with pytest.raises(ConfigError, match="Unsupported type"):
            Config.convert_env_value("X", "1", dict)
