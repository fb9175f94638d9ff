"""Tests for application settings."""

from mediarelay.core.config import Settings


def test_defaults():
    """Test default values without environment overrides."""
    config = Settings(_env_file=None)

    assert config.ENV == "local"
    assert config.SERVICE_NAME == "mediarelay"
    assert config.UPLOAD_FOLDER == "Shelf"
    assert config.UPLOAD_AUTHOR == "gh-action"
    assert config.B2_API_URL == "https://api.backblazeb2.com"


def test_environment_overrides(monkeypatch):
    """Test that settings are read from environment variables."""
    monkeypatch.setenv("UPLOAD_FOLDER", "Covers")
    monkeypatch.setenv("B2_BUCKET_NAME", "books")
    monkeypatch.setenv("REQUEST_TIMEOUT", "5")

    config = Settings(_env_file=None)

    assert config.UPLOAD_FOLDER == "Covers"
    assert config.B2_BUCKET_NAME == "books"
    assert config.REQUEST_TIMEOUT == 5


def test_max_upload_bytes():
    """Test MB to bytes conversion."""
    config = Settings(_env_file=None, MAX_UPLOAD_MB=2)

    assert config.max_upload_bytes == 2 * 1024 * 1024


def test_b2_api_url_strips_trailing_slash():
    """Test that the authorization host is normalized."""
    config = Settings(_env_file=None, B2_API_URL="https://api.example.com/")

    assert config.b2_api_url == "https://api.example.com"


def test_missing_b2_settings():
    """Test reporting of empty B2 settings."""
    config = Settings(_env_file=None, B2_APP_KEY_ID="id", B2_BUCKET_NAME="books")

    assert config.missing_b2_settings() == ["B2_APP_KEY", "B2_BUCKET_ID"]


def test_missing_b2_settings_when_complete(b2_settings):
    """Test that a complete configuration reports nothing missing."""
    assert b2_settings.missing_b2_settings() == []


def test_secrets_are_hidden_in_repr(b2_settings):
    """Test that keys do not leak through repr."""
    text = repr(b2_settings)

    assert "app-key" not in text
    assert "secret-key" not in text
    assert b2_settings.B2_APP_KEY.get_secret_value() == "app-key"
