"""Tests for the exception hierarchy."""

from feedtrans.core.exceptions import (
    BackendError,
    BatchTranslationError,
    ConfigurationError,
    ExtractionEmptyError,
    FeedTransError,
    InputValidationError,
    ResponseParseError,
    TranslationCancelledError,
)


class TestHierarchy:

    def test_all_derive_from_base(self):
        errors = [
            InputValidationError("Missing required fields"),
            ConfigurationError("bad"),
            ExtractionEmptyError("bg"),
            BackendError("anthropic", "timeout"),
            ResponseParseError("Expected 2 translations, got 1"),
            BatchTranslationError(0, 3, RuntimeError("boom")),
            TranslationCancelledError(4, 10),
        ]

        assert all(isinstance(e, FeedTransError) for e in errors)

    def test_str_is_message(self):
        assert str(InputValidationError("Unknown industry")) == "Unknown industry"
        assert str(BackendError("anthropic", "timeout")) == "Backend 'anthropic' failed: timeout"


class TestDetails:

    def test_input_validation_suggestion(self):
        error = InputValidationError(
            "Unknown industry", field="industry", invalid_value="x", valid_values=["custom", "fashion-apparel"]
        )

        assert error.suggestion == "Valid values for industry: custom, fashion-apparel"
        assert error.recoverable

    def test_configuration_suggestion_without_values(self):
        error = ConfigurationError("bad", config_key="FEEDTRANS_BATCH_SIZE")

        assert error.suggestion == "Check the 'FEEDTRANS_BATCH_SIZE' setting"

    def test_to_dict(self):
        payload = ExtractionEmptyError("bg", ["category"]).to_dict()

        assert payload["error_type"] == "ExtractionEmptyError"
        assert payload["message"] == ExtractionEmptyError.DEFAULT_MESSAGE
        assert payload["details"] == {"source_lang": "bg", "fields": ["category"]}

    def test_to_dict_omits_empty_parts(self):
        assert FeedTransError("boom").to_dict() == {
            "error_type": "FeedTransError",
            "message": "boom",
            "recoverable": False,
        }

    def test_raw_response_truncated(self):
        error = ResponseParseError("bad", raw_response="x" * 500)

        assert len(error.details["raw_response"]) == 200
        assert len(error.raw_response) == 500

    def test_batch_error_copies_partial_table(self):
        partial = {"Пръстени": "Rings"}
        error = BatchTranslationError(1, 3, RuntimeError("overloaded"), partial)
        partial["Обеци"] = "Earrings"

        assert error.partial_translations == {"Пръстени": "Rings"}
        assert error.details["partial_count"] == 1
        assert str(error) == "overloaded"

    def test_batch_error_with_empty_last_error(self):
        assert str(BatchTranslationError(0, 3, TimeoutError())) == "TimeoutError"

    def test_cancelled_message(self):
        assert str(TranslationCancelledError(4, 10)) == "Translation cancelled after 4/10 texts"
