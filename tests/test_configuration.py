"""
Unit tests for layered configuration loading.
"""
import pytest

from nestcodec.configuration import get_settings
from nestcodec.errors import ConfigurationError


class TestDefaults:
    """Tests without any configuration source"""

    def test_defaults(self, clean_settings):
        """Defaults apply when nothing is configured"""
        settings = get_settings(app_dir=clean_settings)
        assert settings.NESTCODEC_DEBUG is False
        assert settings.NESTCODEC_ENCODING == "utf-8"
        assert settings.NESTCODEC_JSON_INDENT == 2

    def test_settings_are_cached(self, clean_settings):
        """Repeated calls return the same instance"""
        assert get_settings(app_dir=clean_settings) is get_settings(app_dir=clean_settings)


class TestLayers:
    """Tests for YAML, .env and environment precedence"""

    def test_local_yaml(self, clean_settings):
        """A local nestcodec.yaml is read"""
        (clean_settings / "nestcodec.yaml").write_text("NESTCODEC_JSON_INDENT: 4\n")
        assert get_settings(app_dir=clean_settings).NESTCODEC_JSON_INDENT == 4

    def test_home_yaml_is_overridden_by_local(self, clean_settings):
        """Local files win over the home file"""
        home = clean_settings / "home"
        home.mkdir()
        (home / ".nestcodec.yaml").write_text("NESTCODEC_JSON_INDENT: 1\nNESTCODEC_DEBUG: true\n")
        (clean_settings / "nestcodec.yaml").write_text("NESTCODEC_JSON_INDENT: 3\n")
        settings = get_settings(app_dir=clean_settings)
        assert settings.NESTCODEC_JSON_INDENT == 3
        assert settings.NESTCODEC_DEBUG is True

    def test_dotenv_overrides_yaml(self, clean_settings):
        """.env values win over YAML files"""
        (clean_settings / "nestcodec.yaml").write_text("NESTCODEC_DEBUG: false\n")
        (clean_settings / ".env").write_text("NESTCODEC_DEBUG=true\n")
        assert get_settings(app_dir=clean_settings).NESTCODEC_DEBUG is True

    def test_environment_overrides_dotenv(self, clean_settings, monkeypatch):
        """Process environment wins over .env"""
        (clean_settings / ".env").write_text("NESTCODEC_JSON_INDENT=5\n")
        monkeypatch.setenv("NESTCODEC_JSON_INDENT", "0")
        assert get_settings(app_dir=clean_settings).NESTCODEC_JSON_INDENT == 0

    def test_encoding_is_normalised(self, clean_settings, monkeypatch):
        """Encoding aliases resolve to the codec name"""
        monkeypatch.setenv("NESTCODEC_ENCODING", " UTF8 ")
        assert get_settings(app_dir=clean_settings).NESTCODEC_ENCODING == "utf-8"


class TestInvalidConfiguration:
    """Tests for configuration errors"""

    def test_unknown_encoding(self, clean_settings, monkeypatch):
        """Unknown codecs are rejected"""
        monkeypatch.setenv("NESTCODEC_ENCODING", "no-such-codec")
        with pytest.raises(ConfigurationError) as excinfo:
            get_settings(app_dir=clean_settings)
        assert "Configuration validation errors detected" in str(excinfo.value)

    def test_indent_out_of_range(self, clean_settings, monkeypatch):
        """Indentation is bounded"""
        monkeypatch.setenv("NESTCODEC_JSON_INDENT", "20")
        with pytest.raises(ConfigurationError) as excinfo:
            get_settings(app_dir=clean_settings)
        assert "NESTCODEC_JSON_INDENT" in str(excinfo.value)

    def test_yaml_root_must_be_mapping(self, clean_settings):
        """A list at the root of a config file is rejected"""
        (clean_settings / "nestcodec.yaml").write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            get_settings(app_dir=clean_settings)
