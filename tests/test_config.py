"""Tests for the config module."""

from pathlib import Path

from resumebind.config import Settings, _parse_bool, _parse_cors_origins


class TestParseCorsOrigins:
    """Test CORS origins parsing."""

    def test_parse_cors_origins_with_value(self, monkeypatch):
        """Test parsing CORS origins from environment variable."""
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://localhost:3000,http://localhost:8080")
        result = _parse_cors_origins()
        assert result == ["http://localhost:3000", "http://localhost:8080"]

    def test_parse_cors_origins_without_value(self, monkeypatch):
        """Test default CORS origins when not set."""
        monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
        result = _parse_cors_origins()
        assert result == ["*"]

    def test_parse_cors_origins_empty_string(self, monkeypatch):
        """Test parsing empty CORS origins defaults to wildcard."""
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "")
        result = _parse_cors_origins()
        assert result == ["*"]


class TestParseBool:
    """Test boolean environment flags."""

    def test_true_values(self, monkeypatch):
        """Test 'true' in any case enables a flag."""
        monkeypatch.setenv("QUALIFY_FIELD_PATHS", "TRUE")
        assert _parse_bool("QUALIFY_FIELD_PATHS") is True

    def test_other_values(self, monkeypatch):
        """Test anything else disables a flag."""
        monkeypatch.setenv("QUALIFY_FIELD_PATHS", "yes")
        assert _parse_bool("QUALIFY_FIELD_PATHS") is False

    def test_default(self, monkeypatch):
        """Test the default applies when unset."""
        monkeypatch.delenv("QUALIFY_FIELD_PATHS", raising=False)
        assert _parse_bool("QUALIFY_FIELD_PATHS") is False
        assert _parse_bool("QUALIFY_FIELD_PATHS", "true") is True


class TestSettings:
    """Test Settings configuration."""

    def test_matching_defaults(self):
        """Test the matching defaults."""
        settings = Settings()

        assert 0.0 <= settings.match_threshold <= 1.0
        assert isinstance(settings.qualify_field_paths, bool)
        assert settings.suggestion_limit > 0
        assert isinstance(settings.database_path, Path)

    def test_settings_explicit_values(self, tmp_path):
        """Test Settings with explicit values."""
        db_path = tmp_path / "test.db"

        settings = Settings(
            database_path=db_path,
            host="0.0.0.0",
            port=9000,
            debug=True,
            match_threshold=0.6,
            qualify_field_paths=True,
            high_confidence_threshold=0.8,
            suggestion_limit=3,
            review_ttl_seconds=60,
            context_window=40,
        )

        assert settings.database_path == db_path
        assert settings.host == "0.0.0.0"
        assert settings.port == 9000
        assert settings.debug is True
        assert settings.match_threshold == 0.6
        assert settings.qualify_field_paths is True
        assert settings.high_confidence_threshold == 0.8
        assert settings.suggestion_limit == 3
        assert settings.review_ttl_seconds == 60
        assert settings.context_window == 40

    def test_settings_path_handling(self, tmp_path):
        """Test that paths are correctly converted to Path objects."""
        settings = Settings(database_path=str(tmp_path / "db.db"))

        assert isinstance(settings.database_path, Path)

    def test_settings_cors_origins(self):
        """Test CORS origins are kept as given."""
        settings = Settings(cors_allow_origins=["http://localhost:3000", "http://example.com"])

        assert settings.cors_allow_origins == ["http://localhost:3000", "http://example.com"]
