"""
Tests for the error handling system.
"""

import logging

from voice_slicer.errors import (
    ErrorHandler, ProcessingError, ErrorCategory, ErrorSeverity,
    VoiceSlicerError, SourceOpenError, SourceReadError, NormalizationError,
    ClassifierError, ExtractionError
)


class TestErrorTaxonomy:
    """Test the exception hierarchy."""

    def test_exceptions_carry_processing_errors(self):
        error = SourceReadError("truncated", details="at frame 10", context={'path': 'a.wav'})

        assert isinstance(error, VoiceSlicerError)
        assert str(error) == "truncated"
        assert error.processing_error.category == ErrorCategory.SOURCE_READ
        assert error.processing_error.error_code == "SRC_002"
        assert error.processing_error.details == "at frame 10"
        assert error.processing_error.context == {'path': 'a.wav'}
        assert error.processing_error.suggested_actions

    def test_error_codes_are_distinct(self):
        codes = {
            cls("x").processing_error.error_code
            for cls in (SourceOpenError, SourceReadError, NormalizationError,
                        ClassifierError, ExtractionError)
        }
        assert len(codes) == 5

    def test_base_error_is_uncategorised(self):
        error = VoiceSlicerError("unexpected")
        assert error.processing_error.category == ErrorCategory.GENERAL
        assert error.processing_error.error_code == "GEN_000"

    def test_context_defaults_to_empty_dict(self):
        assert ExtractionError("x").processing_error.context == {}

    def test_suggested_actions_are_copied(self):
        first = ClassifierError("a")
        first.processing_error.suggested_actions.append("extra")
        assert "extra" not in ClassifierError("b").processing_error.suggested_actions


class TestErrorHandler:
    """Test the error collector."""

    def test_error_handler_initialization(self):
        handler = ErrorHandler()
        assert handler.errors == []
        assert handler.warnings == []
        assert not handler.has_errors()
        assert not handler.has_warnings()

    def test_add_error_and_warning(self):
        handler = ErrorHandler()
        handler.add_error(ProcessingError(
            category=ErrorCategory.EXTRACTION,
            severity=ErrorSeverity.WARNING,
            message="Slow extraction",
            details="",
            suggested_actions=[],
            error_code="TEST_001"
        ))
        handler.add_exception(SourceOpenError("missing"))

        assert handler.has_errors()
        assert handler.has_warnings()
        summary = handler.get_error_summary()
        assert summary['error_count'] == 1
        assert summary['warning_count'] == 1
        assert summary['errors'][0]['code'] == "SRC_001"
        assert summary['errors'][0]['severity'] == "critical"

    def test_errors_are_logged(self, caplog):
        handler = ErrorHandler()
        with caplog.at_level(logging.ERROR):
            handler.add_exception(ExtractionError("boom", details="disk full"))
        assert "[EXT_001] boom" in caplog.text
        assert "disk full" in caplog.text

    def test_clear_errors(self):
        handler = ErrorHandler()
        handler.add_exception(ExtractionError("boom"))
        handler.clear_errors()
        assert not handler.has_errors()
