"""
Error handling system for the voice slicer.

This module provides the error taxonomy used across detection and
extraction, together with a small collector that logs errors with
actionable guidance.
"""

import logging
from enum import Enum
from typing import List, Optional, Dict, Any
from dataclasses import dataclass


class ErrorSeverity(Enum):
    """Error severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors that can occur during processing."""
    GENERAL = "general"
    SOURCE_OPEN = "source_open"
    SOURCE_READ = "source_read"
    NORMALIZATION = "normalization"
    CLASSIFICATION = "classification"
    EXTRACTION = "extraction"


@dataclass
class ProcessingError:
    """Represents a processing error with context and guidance."""
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    details: str
    suggested_actions: List[str]
    error_code: str
    context: Dict[str, Any] = None

    def __post_init__(self):
        if self.context is None:
            self.context = {}


class VoiceSlicerError(Exception):
    """Base exception for voice slicer errors."""

    category = ErrorCategory.GENERAL
    severity = ErrorSeverity.ERROR
    error_code = "GEN_000"
    suggested_actions: List[str] = []

    def __init__(self, message: str, details: str = "",
                 context: Optional[Dict[str, Any]] = None):
        self.processing_error = ProcessingError(
            category=self.category,
            severity=self.severity,
            message=message,
            details=details,
            suggested_actions=list(self.suggested_actions),
            error_code=self.error_code,
            context=context,
        )
        super().__init__(message)


class SourceOpenError(VoiceSlicerError):
    """Raised when an audio file is missing or cannot be opened."""
    category = ErrorCategory.SOURCE_OPEN
    severity = ErrorSeverity.CRITICAL
    error_code = "SRC_001"
    suggested_actions = [
        "Check that the file path is correct",
        "Ensure the file is a readable PCM WAV or a format supported by librosa",
    ]


class SourceReadError(VoiceSlicerError):
    """Raised when a PCM stream is corrupt or truncated mid-read."""
    category = ErrorCategory.SOURCE_READ
    error_code = "SRC_002"
    suggested_actions = [
        "Re-encode the input file and try again",
        "Enable truncate_on_read_error to keep the regions found before the failure",
    ]


class NormalizationError(VoiceSlicerError):
    """Raised when an input file cannot be converted to PCM."""
    category = ErrorCategory.NORMALIZATION
    error_code = "NORM_001"
    suggested_actions = [
        "Verify the input file is not corrupted",
        "Convert the file to WAV and try again",
    ]


class ClassifierError(VoiceSlicerError):
    """Raised when the voice activity classifier fails on a frame."""
    category = ErrorCategory.CLASSIFICATION
    severity = ErrorSeverity.CRITICAL
    error_code = "VAD_001"
    suggested_actions = [
        "Use a sample rate of 8000, 16000, 32000 or 48000 Hz",
        "Use a frame duration of 10, 20 or 30 ms",
    ]


class ExtractionError(VoiceSlicerError):
    """Raised when a single region cannot be sliced."""
    category = ErrorCategory.EXTRACTION
    error_code = "EXT_001"
    suggested_actions = [
        "Check free disk space and permissions of the output directory",
    ]


class ErrorHandler:
    """
    Collects and reports processing errors.

    Errors and warnings are logged at the level matching their severity
    and can be summarised once processing finishes.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.errors: List[ProcessingError] = []
        self.warnings: List[ProcessingError] = []

    def add_error(self, error: ProcessingError) -> None:
        """Add an error to the collection."""
        if error.severity in [ErrorSeverity.ERROR, ErrorSeverity.CRITICAL]:
            self.errors.append(error)
        elif error.severity == ErrorSeverity.WARNING:
            self.warnings.append(error)

        log_level = {
            ErrorSeverity.INFO: logging.INFO,
            ErrorSeverity.WARNING: logging.WARNING,
            ErrorSeverity.ERROR: logging.ERROR,
            ErrorSeverity.CRITICAL: logging.CRITICAL
        }[error.severity]

        self.logger.log(log_level, f"[{error.error_code}] {error.message}")
        if error.details:
            self.logger.log(log_level, f"Details: {error.details}")

    def add_exception(self, exc: VoiceSlicerError) -> None:
        """Record the processing error carried by an exception."""
        self.add_error(exc.processing_error)

    def has_errors(self) -> bool:
        """Check if any errors have been recorded."""
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        """Check if any warnings have been recorded."""
        return len(self.warnings) > 0

    def get_error_summary(self) -> Dict[str, Any]:
        """Get a summary of all errors and warnings."""
        return {
            'error_count': len(self.errors),
            'warning_count': len(self.warnings),
            'errors': [self._format_error_for_summary(e) for e in self.errors],
            'warnings': [self._format_error_for_summary(e) for e in self.warnings]
        }

    def _format_error_for_summary(self, error: ProcessingError) -> Dict[str, Any]:
        """Format error for summary display."""
        return {
            'code': error.error_code,
            'category': error.category.value,
            'severity': error.severity.value,
            'message': error.message,
            'suggested_actions': error.suggested_actions
        }

    def clear_errors(self) -> None:
        """Clear all recorded errors and warnings."""
        self.errors.clear()
        self.warnings.clear()
