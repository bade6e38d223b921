"""Unit tests for configuration."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from genzai.config import GeminiModel, Settings


class TestGeminiModel:
    """Tests for GeminiModel enum."""

    def test_values(self):
        assert GeminiModel.FLASH_2_5 == "gemini-2.5-flash"
        assert GeminiModel.PRO_2_5 == "gemini-2.5-pro"
        assert GeminiModel.FLASH_IMAGE_2_5 == "gemini-2.5-flash-image"

    def test_only_flash_image_is_image_model(self):
        assert [m for m in GeminiModel if m.is_image_model] == [GeminiModel.FLASH_IMAGE_2_5]

    def test_every_model_has_label(self):
        assert all(m.label for m in GeminiModel)

    @given(st.text())
    def test_model_validation(self, value: str):
        """Property test: Only known identifiers are accepted."""
        if value in {m.value for m in GeminiModel}:
            assert GeminiModel(value) in GeminiModel
        else:
            with pytest.raises(ValueError):
                GeminiModel(value)


class TestSettings:
    """Tests for Settings.from_env."""

    ENV_VARS = (
        "GEMINI_API_KEY",
        "GENZAI_DEFAULT_MODEL",
        "GENZAI_IMAGE_MODEL",
        "GENZAI_ENHANCER_MODEL",
        "GENZAI_IMAGE_ENDPOINT",
        "GENZAI_ENABLE_SEARCH",
    )

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in self.ENV_VARS:
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        settings = Settings.from_env()

        assert settings.api_key is None
        assert settings.default_model == GeminiModel.FLASH_2_5
        assert settings.image_model == "gemini-2.5-flash-image"
        assert settings.enhancer_model == "gemini-2.5-flash"
        assert settings.image_endpoint is None
        assert settings.enable_search is True

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "key")
        monkeypatch.setenv("GENZAI_DEFAULT_MODEL", "gemini-2.5-pro")
        monkeypatch.setenv("GENZAI_IMAGE_MODEL", "imagen-4.0-generate-001")
        monkeypatch.setenv("GENZAI_IMAGE_ENDPOINT", "http://localhost:8000/api/image")
        monkeypatch.setenv("GENZAI_ENABLE_SEARCH", "false")

        settings = Settings.from_env()

        assert settings.api_key == "key"
        assert settings.default_model == GeminiModel.PRO_2_5
        assert settings.image_model == "imagen-4.0-generate-001"
        assert settings.image_endpoint == "http://localhost:8000/api/image"
        assert settings.enable_search is False

    def test_unknown_default_model(self, monkeypatch):
        monkeypatch.setenv("GENZAI_DEFAULT_MODEL", "gpt-4o")
        with pytest.raises(ValueError):
            Settings.from_env()

    def test_settings_are_frozen(self):
        with pytest.raises(ValueError):
            Settings().api_key = "changed"  # type: ignore
