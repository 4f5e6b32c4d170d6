# tests/core/test_config.py
"""Tests for settings loading with Dynaconf + Pydantic."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from bigcsv.core.config import BigCSVSettings, HTTPSettings, load_settings


@pytest.fixture
def write_settings(tmp_path: Path):
    def _write(text: str) -> Path:
        path = tmp_path / "settings.yaml"
        path.write_text(text)
        return path

    return _write


class TestSettingsSchema:
    """BigCSVSettings validation."""

    def test_defaults(self) -> None:
        settings = BigCSVSettings()

        assert settings.workers == 1
        assert settings.header is False
        assert settings.reader.delimiter == ","
        assert settings.http == HTTPSettings()

    def test_workers_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            BigCSVSettings(workers=0)

    def test_unknown_keys_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BigCSVSettings(worker=4)  # type: ignore[call-arg]

    def test_settings_are_frozen(self) -> None:
        settings = BigCSVSettings()

        with pytest.raises(ValidationError):
            settings.workers = 3  # type: ignore[misc]


class TestLoadSettings:
    """load_settings() file and environment handling."""

    def test_loads_yaml(self, write_settings) -> None:
        path = write_settings('workers: 4\nheader: true\nreader:\n  delimiter: ";"\n  encoding: latin-1\nhttp:\n  timeout: 5\n')

        settings = load_settings(path)

        assert settings.workers == 4
        assert settings.header is True
        assert settings.reader.delimiter == ";"
        assert settings.reader.encoding == "latin-1"
        assert settings.http.timeout == 5

    def test_env_overrides_file(self, write_settings, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write_settings("workers: 2\n")
        monkeypatch.setenv("BIGCSV_WORKERS", "6")

        assert load_settings(path).workers == 6

    def test_header_values_expand_env_vars(self, write_settings, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write_settings('http:\n  headers:\n    Authorization: "Bearer ${DATA_API_TOKEN}"\n    X-Client: "${CLIENT_NAME:-bigcsv}"\n')
        monkeypatch.setenv("DATA_API_TOKEN", "s3cret")
        monkeypatch.delenv("CLIENT_NAME", raising=False)

        headers = load_settings(path).http.headers

        assert headers == {"Authorization": "Bearer s3cret", "X-Client": "bigcsv"}

    def test_unset_variable_without_default_is_kept(self, write_settings, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write_settings('http:\n  headers:\n    Authorization: "Bearer ${UNSET_TOKEN_FOR_TEST}"\n')
        monkeypatch.delenv("UNSET_TOKEN_FOR_TEST", raising=False)

        assert load_settings(path).http.headers["Authorization"] == "Bearer ${UNSET_TOKEN_FOR_TEST}"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_settings(tmp_path / "nope.yaml")

    def test_invalid_values_rejected(self, write_settings) -> None:
        path = write_settings("workers: 0\n")

        with pytest.raises(ValidationError):
            load_settings(path)

    def test_invalid_reader_dialect_rejected(self, write_settings) -> None:
        path = write_settings('reader:\n  delimiter: ","\n  quotechar: ","\n')

        with pytest.raises(ValidationError, match="must differ"):
            load_settings(path)

    def test_unknown_keys_rejected(self, write_settings) -> None:
        path = write_settings("workers: 2\nthreads: 8\n")

        with pytest.raises(ValidationError):
            load_settings(path)
