"""
Voice Slicer

Splits recordings into speech regions and extracts each region as an
independent audio slice.
"""

__version__ = "0.1.0"

from .config import DetectionConfig
from .models import Region, AudioInfo, AudioSession, SliceResult
from .errors import (
    VoiceSlicerError,
    SourceOpenError,
    SourceReadError,
    NormalizationError,
    ClassifierError,
    ExtractionError,
)
from .audio import (
    EnergyRegionDetector,
    VadRegionDetector,
    RegionExtractor,
    VoiceProcessor,
    successful_paths,
)

__all__ = [
    'DetectionConfig',
    'Region',
    'AudioInfo',
    'AudioSession',
    'SliceResult',
    'VoiceSlicerError',
    'SourceOpenError',
    'SourceReadError',
    'NormalizationError',
    'ClassifierError',
    'ExtractionError',
    'EnergyRegionDetector',
    'VadRegionDetector',
    'RegionExtractor',
    'VoiceProcessor',
    'successful_paths',
]
