"""
Energy-based speech region detection.

Computes one RMS energy per fixed-size chunk, takes a low percentile of
the whole-file energy distribution as the noise floor, and grows regions
over the chunks that rise above it.
"""

import logging
from typing import Iterable, List, Sequence

import numpy as np

from ..config import DetectionConfig
from ..errors import SourceReadError
from ..models import AudioSession, Region
from .regions import RegionGrower
from .stats import rms, percentile


logger = logging.getLogger(__name__)


class EnergyRegionDetector:
    """
    Percentile-threshold detector over RMS chunk energies.

    The detector is a two-pass batch scan: the first pass reduces every
    chunk to its energy, the second walks the energies with a
    ``RegionGrower``.
    """

    def __init__(self, config: DetectionConfig = None):
        """
        Initialize the detector.

        Args:
            config: Detection configuration
        """
        self.config = config or DetectionConfig()

    def detect(self, session: AudioSession, chunks: Iterable[np.ndarray]) -> List[Region]:
        """
        Detect speech regions in a chunk stream.

        Args:
            session: Session of the file the chunks come from
            chunks: Sample chunks of ``config.chunk_size`` frames each

        Returns:
            Ordered, non-overlapping speech regions

        Raises:
            SourceReadError: If reading fails and ``truncate_on_read_error`` is off
        """
        energies = self.compute_energies(chunks)
        regions = self.detect_from_energies(energies, session.chunk_duration)
        logger.info(
            f"Energy detector found {len(regions)} regions in "
            f"{len(energies)} chunks of {session.source_path}"
        )
        return regions

    def compute_energies(self, chunks: Iterable[np.ndarray]) -> List[float]:
        """RMS energy of every chunk, in stream order."""
        energies = []
        try:
            for chunk in chunks:
                energies.append(rms(chunk))
        except SourceReadError as e:
            if not self.config.truncate_on_read_error:
                raise
            logger.warning(
                f"Read error after {len(energies)} chunks, truncating scan: {e}"
            )
        return energies

    def threshold(self, energies: Sequence[float]) -> float:
        """Noise-floor threshold for an energy sequence."""
        return percentile(energies, self.config.energy_percentile)

    def detect_from_energies(self, energies: Sequence[float],
                             chunk_duration: float) -> List[Region]:
        """
        Grow regions over a precomputed energy sequence.

        Args:
            energies: One energy per chunk
            chunk_duration: Seconds per chunk

        Returns:
            Ordered, non-overlapping speech regions
        """
        threshold = self.threshold(energies)
        logger.debug(f"Noise floor threshold: {threshold:.6f}")

        grower = RegionGrower(chunk_duration, self.config)
        for energy in energies:
            is_silence = energy <= threshold
            grower.feed(not is_silence)
        return grower.finish()
