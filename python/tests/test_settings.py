"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from brainy.config import BrainySettings, load_settings
from brainy.exceptions import ConfigError


class TestBrainySettings:
    """Tests for defaults and validation."""

    def test_defaults(self) -> None:
        settings = BrainySettings()

        assert settings.provider == "openai"
        assert settings.default_model == "gpt-4.1"
        assert settings.request_timeout_seconds == 8.0
        assert settings.max_retries == 3
        assert settings.default_context == "default"
        assert settings.workspace_root is None

    def test_frozen(self) -> None:
        settings = BrainySettings()

        with pytest.raises(ValidationError):
            settings.provider = "anthropic"  # type: ignore[misc]

    def test_accepts_echo_provider(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("BRAINY_PROVIDER", "echo")

        assert load_settings().provider == "echo"

    def test_rejects_unknown_provider(self) -> None:
        with pytest.raises(ValidationError):
            BrainySettings(provider="mystery")  # type: ignore[arg-type]


class TestLoadSettings:
    """Tests for YAML and environment loading."""

    def test_missing_default_file_uses_defaults(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)

        assert load_settings() == BrainySettings()

    def test_default_file_location(self, tmp_path: Path, monkeypatch) -> None:
        (tmp_path / ".brainy").mkdir()
        (tmp_path / ".brainy" / "config.yaml").write_text("provider: anthropic\n")
        monkeypatch.chdir(tmp_path)

        assert load_settings().provider == "anthropic"

    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "brainy.yaml"
        path.write_text(
            "default_model: claude-test\n"
            "provider: anthropic\n"
            "request_timeout_seconds: 30\n"
            "workspace_root: /srv/notes\n"
        )

        settings = load_settings(path)

        assert settings.default_model == "claude-test"
        assert settings.request_timeout_seconds == 30.0
        assert settings.workspace_root == Path("/srv/notes")

    def test_empty_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_settings(path) == BrainySettings()

    def test_explicit_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("provider: [unclosed\n")

        with pytest.raises(ConfigError, match="Failed to read config file"):
            load_settings(path)

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_settings(path)

    def test_environment_overrides_file(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "brainy.yaml"
        path.write_text("provider: anthropic\nmax_retries: 2\n")
        monkeypatch.setenv("BRAINY_PROVIDER", "openai")
        monkeypatch.setenv("BRAINY_MAX_RETRIES", "5")

        settings = load_settings(path)

        assert settings.provider == "openai"
        assert settings.max_retries == 5

    def test_invalid_value_reports_details(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("BRAINY_REQUEST_TIMEOUT_SECONDS", "-1")

        with pytest.raises(ConfigError) as exc_info:
            load_settings()

        assert exc_info.value.message == "Invalid configuration"
        assert exc_info.value.details[0].startswith("request_timeout_seconds")
