import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from config import EngineConfig


class TestEngineConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TOY_PAYMENTS_LOG_LEVEL", raising=False)
        monkeypatch.delenv("TOY_PAYMENTS_REPORT_STATS", raising=False)
        config = EngineConfig.from_env()
        assert config.log_level == "WARNING"
        assert config.report_stats is True

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TOY_PAYMENTS_LOG_LEVEL", "debug")
        monkeypatch.setenv("TOY_PAYMENTS_REPORT_STATS", "off")
        config = EngineConfig.from_env()
        assert config.log_level == "DEBUG"
        assert config.report_stats is False

    def test_bad_flag(self, monkeypatch):
        monkeypatch.setenv("TOY_PAYMENTS_REPORT_STATS", "maybe")
        with pytest.raises(ValueError):
            EngineConfig.from_env()

    def test_bad_log_level(self):
        with pytest.raises(ValueError):
            EngineConfig(log_level="CHATTY")

    def test_overrides(self):
        config = EngineConfig().with_overrides(log_level="info", report_stats=False)
        assert config == EngineConfig(log_level="INFO", report_stats=False)
        assert EngineConfig().with_overrides() == EngineConfig()
