"""Tests for settings validation and the logging setup."""

import json
import logging

import pytest

from isotoken.core.config import ConfigurationError, Environment, INSECURE_DEFAULT_KEY, Settings
from isotoken.core.logging_config import _JsonFormatter, _SecretFilter, setup_logging
from tests.conftest import make_signed


class TestSettings:

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("ISOTOKEN_DEFAULT_ALGORITHM", "HS512")
        monkeypatch.setenv("ISOTOKEN_MAX_FORM_BYTES", "2048")
        s = Settings()
        assert s.default_algorithm == "HS512"
        assert s.max_form_bytes == 2048

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_bad_log_level(self):
        with pytest.raises(ValueError):
            Settings(log_level="LOUD")

    def test_bad_log_format(self):
        with pytest.raises(ValueError):
            Settings(log_format="xml")

    def test_production_rejects_default_key(self):
        s = Settings(environment=Environment.PRODUCTION, signing_key=INSECURE_DEFAULT_KEY)
        with pytest.raises(ConfigurationError):
            s.validate_production_config()

    def test_development_allows_default_key(self):
        Settings(environment=Environment.DEVELOPMENT, signing_key=INSECURE_DEFAULT_KEY).validate_production_config()

    def test_production_with_real_key(self):
        Settings(environment=Environment.PRODUCTION, signing_key="a" * 64).validate_production_config()


def _record(msg: str, *args, **extra) -> logging.LogRecord:
    record = logging.LogRecord("isotoken.test", logging.INFO, __file__, 1, msg, args, None)
    record.__dict__.update(extra)
    return record


class TestSecretFilter:

    def test_redacts_encoded_tokens(self):
        signed = make_signed({"sub": "alice"})
        record = _record("rejected %s", signed)
        _SecretFilter().filter(record)
        assert signed not in record.getMessage()
        assert "***REDACTED***" in record.getMessage()

    def test_redacts_bearer_credentials(self):
        record = _record("header was Bearer abcdefghijklmnopqrstuvwxyz0123")
        _SecretFilter().filter(record)
        assert record.getMessage() == "header was Bearer ***REDACTED***"

    def test_leaves_ordinary_text(self):
        record = _record("Token rejected")
        _SecretFilter().filter(record)
        assert record.getMessage() == "Token rejected"

    def test_leaves_dotted_module_names(self):
        record = _record("loaded isotoken.middleware.request and isotoken.signing.registry")
        _SecretFilter().filter(record)
        assert record.getMessage() == "loaded isotoken.middleware.request and isotoken.signing.registry"


class TestJsonFormatter:

    def test_merges_extra_fields(self):
        line = _JsonFormatter().format(_record("Token rejected", flags=["expired"], alg="HS256"))
        payload = json.loads(line)
        assert payload["message"] == "Token rejected"
        assert payload["level"] == "INFO"
        assert payload["flags"] == ["expired"]
        assert payload["alg"] == "HS256"


class TestSetupLogging:

    def test_json_handler_installed(self):
        setup_logging("warning", "json")
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, _JsonFormatter)

    def test_text_handler_installed(self):
        setup_logging("INFO", "text")
        assert not isinstance(logging.getLogger().handlers[0].formatter, _JsonFormatter)
