"""Tests for environment-driven settings"""

import pytest
from pydantic import ValidationError

from filehandles.core.config import Settings, get_settings
from filehandles.core.exceptions import ERROR_CODES, FilesError, SymlinkLoopError
from filehandles.core.types import Lock


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("LOCK_FILE_NAME", "DEFAULT_LOCK", "REMOVE_LOCK_FILE_ON_UNLOCK", "LOGGING_ENABLED"):
            monkeypatch.delenv(f"FILEHANDLES_{name}", raising=False)

        settings = Settings(_env_file=None)

        assert settings.lock_file_name == ".lock"
        assert settings.lock_file_opening_mode == "w"
        assert settings.remove_lock_file_on_unlock is True
        assert settings.transaction_lock is Lock.EXCLUSIVE
        assert settings.max_link_depth == 40
        assert settings.logging_enabled is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("FILEHANDLES_LOCK_FILE_NAME", ".mutex")
        monkeypatch.setenv("FILEHANDLES_DEFAULT_LOCK", "shared")
        monkeypatch.setenv("FILEHANDLES_REMOVE_LOCK_FILE_ON_UNLOCK", "false")

        settings = Settings(_env_file=None)

        assert settings.lock_file_name == ".mutex"
        assert settings.transaction_lock is Lock.SHARED
        assert settings.remove_lock_file_on_unlock is False

    def test_production_forces_json_logs(self, monkeypatch):
        monkeypatch.setenv("FILEHANDLES_ENVIRONMENT", "production")
        monkeypatch.setenv("FILEHANDLES_LOG_FORMAT", "console")

        settings = Settings(_env_file=None)

        assert settings.is_production
        assert settings.log_format == "json"

    def test_invalid_link_depth(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, max_link_depth=0)

    def test_invalid_lock(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_lock="upgradable")

    def test_get_settings_is_singleton(self):
        assert get_settings() is get_settings()


class TestErrors:
    def test_error_report(self):
        error = SymlinkLoopError("/tmp/a", details={"depth": 3})

        report = error.to_error_report()

        assert isinstance(error, FilesError)
        assert report.code == "FILES-508"
        assert report.details == {"depth": 3}
        assert "/tmp/a" in report.message

    def test_every_code_is_documented(self):
        assert set(ERROR_CODES) == {
            "FILES-404", "FILES-405", "FILES-409", "FILES-410", "FILES-415", "FILES-508",
        }
