"""
Pytest configuration and fixtures for the voice slicer tests.

Provides synthetic recordings written with soundfile and a Hypothesis
profile for the property-based tests.
"""

import pytest
from hypothesis import settings, Verbosity

from voice_slicer.config import DetectionConfig

from audio_helpers import make_bursts, write_wav


settings.register_profile("voice_slicer",
    max_examples=100,
    verbosity=Verbosity.normal,
    deadline=None
)
settings.load_profile("voice_slicer")


@pytest.fixture
def detection_config():
    """Region limits used by the documented scenarios."""
    return DetectionConfig(min_region_size=0.5, max_region_size=6.0)


@pytest.fixture
def burst_wav(tmp_path):
    """Mono 16 kHz file: 1s silence, 2s tone, 1s silence, 1.5s tone, 1s silence."""
    signal = make_bursts([(1.0, False), (2.0, True), (1.0, False), (1.5, True), (1.0, False)])
    return write_wav(tmp_path / "bursts.wav", signal)


@pytest.fixture
def stereo_wav(tmp_path):
    """Stereo 16 kHz file with one tone burst."""
    signal = make_bursts([(1.0, False), (2.0, True), (1.0, False)], channels=2)
    return write_wav(tmp_path / "stereo.wav", signal)
