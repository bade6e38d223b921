"""Unit tests for error classification."""
from hypothesis import given
from hypothesis import strategies as st

from genzai.backends.errors import (
    BUSY_MESSAGE,
    IMAGE_FAILURE_FALLBACK,
    MODEL_UNAVAILABLE_MESSAGE,
    NO_IMAGE_MESSAGE,
    BackendError,
    EmptyImageResultError,
    ImageSynthesisError,
    strip_error_prefix,
)
from genzai.pipelines.classifier import (
    FALLBACK_MESSAGE,
    TEXT_FAILURE_MESSAGE,
    ErrorCategory,
    ErrorClassifier,
)


class _Unprintable(Exception):
    def __str__(self):
        raise RuntimeError("cannot render")


class TestStripErrorPrefix:
    """Tests for strip_error_prefix."""

    def test_strips_marker_and_whitespace(self):
        assert strip_error_prefix("  API Error:   quota exceeded  ") == "quota exceeded"

    def test_leaves_other_text(self):
        assert strip_error_prefix("quota exceeded") == "quota exceeded"

    def test_only_leading_marker(self):
        assert strip_error_prefix("bad API Error: here") == "bad API Error: here"


class TestErrorClassifierImageMode:
    """Image failures always show the cleaned reason."""

    def test_generic_failure_includes_reason(self):
        result = ErrorClassifier().classify(BackendError("API Error: model overloaded", status=500), image_mode=True)

        assert result.category == ErrorCategory.SYNTHESIS_FAILURE
        assert "model overloaded" in result.text
        assert "API Error:" not in result.text

    def test_rate_limit_wording(self):
        error = ImageSynthesisError.from_error(BackendError("Resource exhausted", status=429))
        result = ErrorClassifier().classify(error, image_mode=True)

        assert BUSY_MESSAGE in result.text
        assert "Resource exhausted" in result.text

    def test_unwrapped_rate_limit_is_clarified(self):
        result = ErrorClassifier().classify(BackendError("Resource exhausted", status=429), image_mode=True)
        assert BUSY_MESSAGE in result.text

    def test_not_found_wording(self):
        result = ErrorClassifier().classify(BackendError("no such model", status=404), image_mode=True)

        assert MODEL_UNAVAILABLE_MESSAGE in result.text
        assert "no such model" in result.text

    def test_empty_result(self):
        result = ErrorClassifier().classify(EmptyImageResultError(), image_mode=True)

        assert result.category == ErrorCategory.EMPTY_IMAGE_RESULT
        assert NO_IMAGE_MESSAGE in result.text

    def test_empty_reason_uses_fallback(self):
        result = ErrorClassifier().classify(RuntimeError(""), image_mode=True)
        assert IMAGE_FAILURE_FALLBACK in result.text

    def test_multiline_template(self):
        text = ErrorClassifier().describe(RuntimeError("boom"), image_mode=True)
        assert "\n\n" in text


class TestErrorClassifierTextMode:
    """Text failures never show the raw reason."""

    def test_fixed_message(self):
        result = ErrorClassifier().classify(BackendError("internal stack trace", status=500), image_mode=False)

        assert result.category == ErrorCategory.STREAM_FAILURE
        assert result.text == TEXT_FAILURE_MESSAGE
        assert result.reason == "internal stack trace"

    def test_reason_is_logged(self, caplog):
        ErrorClassifier().classify(RuntimeError("secret backend detail"), image_mode=False)
        assert "secret backend detail" in caplog.text

    @given(st.text(min_size=1))
    def test_reason_never_leaks(self, reason: str):
        """Property test: displayed text is constant whatever the reason."""
        text = ErrorClassifier().describe(RuntimeError(reason), image_mode=False)
        assert text == TEXT_FAILURE_MESSAGE


class TestClassifierFallback:
    """Unparseable failures get a fixed string instead of raising."""

    def test_non_exception(self):
        result = ErrorClassifier().classify(object(), image_mode=True)

        assert result.category == ErrorCategory.CLASSIFIER_FALLBACK
        assert result.text == FALLBACK_MESSAGE

    def test_unprintable_exception(self):
        for image_mode in (True, False):
            result = ErrorClassifier().classify(_Unprintable(), image_mode=image_mode)
            assert result.text == FALLBACK_MESSAGE
