"""
Audio processing module for speech region detection and extraction.
"""

from .source import PcmSource
from .normalizer import AudioNormalizer
from .energy import EnergyRegionDetector
from .vad import FrameClassifier, WebRtcClassifier, VadRegionDetector
from .extractor import RegionExtractor, successful_paths
from .slicer import extract_slice
from .processor import VoiceProcessor

__all__ = [
    'PcmSource',
    'AudioNormalizer',
    'EnergyRegionDetector',
    'FrameClassifier',
    'WebRtcClassifier',
    'VadRegionDetector',
    'RegionExtractor',
    'successful_paths',
    'extract_slice',
    'VoiceProcessor'
]
