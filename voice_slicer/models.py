"""
Core data models for the voice slicer.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ExtractionError


@dataclass(frozen=True)
class Region:
    """A closed time interval, in seconds, believed to contain speech."""
    start: float
    end: float

    def __post_init__(self):
        if self.start < 0:
            raise ValueError(f"Region start must be >= 0, got {self.start}")
        if self.end <= self.start:
            raise ValueError(f"Region end ({self.end}) must be after start ({self.start})")

    @property
    def duration(self) -> float:
        return self.end - self.start

    def __repr__(self) -> str:
        return f"Region({self.start:.3f}s-{self.end:.3f}s)"


@dataclass(frozen=True)
class AudioInfo:
    """File-level metadata reported by a sample source."""
    sample_rate: int
    channels: int
    sample_width: int  # bits per sample
    total_frames: int

    @property
    def duration(self) -> float:
        return self.total_frames / self.sample_rate if self.sample_rate else 0.0


@dataclass(frozen=True)
class AudioSession:
    """Read-only per-file state derived when a file is opened."""
    source_path: Path
    info: AudioInfo
    vad_mode: bool
    chunk_duration: float  # seconds per chunk or frame
    chunk_count: int


@dataclass(frozen=True)
class SliceResult:
    """Outcome of extracting one region; ``index`` is its input position."""
    index: int
    region: Region
    path: Optional[Path] = None
    error: Optional[ExtractionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.path is not None
