"""
Configuration settings for the voice slicer.

Detection and extraction tunables live in ``DetectionConfig`` and are passed
explicitly into every detector and extractor call.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class Config:
    """Configuration class for application settings."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent
    OUTPUT_DIR = PROJECT_ROOT / "output"

    # Input formats accepted by the normalizer
    AUDIO_FORMATS = [".wav", ".mp3", ".m4a", ".flac", ".ogg"]


VALID_VAD_FRAME_DURATIONS = (10, 20, 30)
VALID_VAD_SAMPLE_RATES = (8000, 16000, 32000, 48000)


@dataclass
class DetectionConfig:
    """Tunables for region detection and extraction."""

    # Energy detector
    chunk_size: int = 4096  # samples per chunk
    energy_percentile: float = 0.2  # noise floor rank

    # Region growing
    max_region_size: float = 6.0  # seconds
    min_region_size: float = 0.5  # seconds
    flush_open_region_at_end: bool = False

    # VAD detector
    vad_frame_duration_ms: int = 20
    vad_mode: int = 1
    vad_sample_rate: int = 16000

    # Extraction
    max_concurrent: int = 10
    extraction_timeout: Optional[float] = None  # seconds, None waits forever

    # Source handling
    truncate_on_read_error: bool = False

    temp_dir: Optional[Path] = None
    output_dir: Optional[Path] = None

    def __post_init__(self):
        """Validate values and normalise paths."""
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if not 0.0 <= self.energy_percentile <= 1.0:
            raise ValueError(
                f"energy_percentile must be within [0, 1], got {self.energy_percentile}"
            )
        if self.min_region_size < 0:
            raise ValueError(f"min_region_size must be >= 0, got {self.min_region_size}")
        if self.max_region_size <= 0 or self.max_region_size < self.min_region_size:
            raise ValueError(
                f"max_region_size must be positive and >= min_region_size "
                f"({self.min_region_size}), got {self.max_region_size}"
            )
        if self.vad_frame_duration_ms not in VALID_VAD_FRAME_DURATIONS:
            raise ValueError(
                f"vad_frame_duration_ms must be one of {VALID_VAD_FRAME_DURATIONS}, "
                f"got {self.vad_frame_duration_ms}"
            )
        if self.vad_mode not in range(4):
            raise ValueError(f"vad_mode must be 0-3, got {self.vad_mode}")
        if self.vad_sample_rate not in VALID_VAD_SAMPLE_RATES:
            raise ValueError(
                f"vad_sample_rate must be one of {VALID_VAD_SAMPLE_RATES}, "
                f"got {self.vad_sample_rate}"
            )
        if self.max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {self.max_concurrent}")
        if self.extraction_timeout is not None and self.extraction_timeout <= 0:
            raise ValueError(
                f"extraction_timeout must be positive, got {self.extraction_timeout}"
            )

        if self.temp_dir is not None:
            self.temp_dir = Path(self.temp_dir)
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)

    @property
    def vad_frame_size(self) -> int:
        """Samples per VAD frame at the VAD sample rate."""
        return self.frame_size_at(self.vad_sample_rate)

    def frame_size_at(self, sample_rate: int) -> int:
        """Samples per VAD frame at ``sample_rate``."""
        return sample_rate * self.vad_frame_duration_ms // 1000

    def resolve_output_dir(self) -> Path:
        """Directory slices are written to."""
        return self.output_dir if self.output_dir is not None else Config.OUTPUT_DIR
