"""
Tests for environment configuration.
"""

import pytest

from formsync.config import Config


class TestConfigValidate:
    """Test Config.validate."""

    def test_defaults_are_valid(self, monkeypatch):
        monkeypatch.setattr(Config, "SUBMIT_URL", "http://localhost:5000/api/forms/submit")
        monkeypatch.setattr(Config, "SUBMIT_TIMEOUT", "30")
        monkeypatch.setattr(Config, "LOG_LEVEL", "WARNING")
        Config.validate()
        assert Config.submit_timeout() == 30.0

    @pytest.mark.parametrize("attr, value, name", [
        ("SUBMIT_URL", "ftp://host", "FORMSYNC_SUBMIT_URL"),
        ("SUBMIT_TIMEOUT", "soon", "FORMSYNC_SUBMIT_TIMEOUT"),
        ("SUBMIT_TIMEOUT", "0", "FORMSYNC_SUBMIT_TIMEOUT"),
        ("LOG_LEVEL", "LOUD", "FORMSYNC_LOG_LEVEL"),
    ])
    def test_invalid(self, monkeypatch, attr, value, name):
        monkeypatch.setattr(Config, "SUBMIT_URL", "http://localhost:5000/api/forms/submit")
        monkeypatch.setattr(Config, "SUBMIT_TIMEOUT", "30")
        monkeypatch.setattr(Config, "LOG_LEVEL", "INFO")
        monkeypatch.setattr(Config, attr, value)
        with pytest.raises(RuntimeError, match=name):
            Config.validate()
