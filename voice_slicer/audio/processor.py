"""
Main voice processor that integrates normalization, detection and extraction.

Provides a high-level interface for the complete pipeline: normalize an
input file into PCM, detect speech regions with the energy or VAD
detector, and slice the regions into independent files.
"""

import logging
import math
from pathlib import Path
from typing import List, Optional

from ..config import DetectionConfig
from ..models import AudioSession, Region, SliceResult
from .energy import EnergyRegionDetector
from .extractor import ProgressCallback, RegionExtractor, SliceFunc
from .normalizer import AudioNormalizer
from .slicer import extract_slice
from .source import PcmSource
from .vad import ClassifierFactory, VadRegionDetector


logger = logging.getLogger(__name__)


class VoiceProcessor:
    """
    Orchestrates region detection and extraction for one file at a time.

    Usage:
        with VoiceProcessor(config) as processor:
            processor.open("talk.mp3", vad_mode=True)
            regions = processor.regions()
            results = processor.extract(regions)
    """

    def __init__(self, config: Optional[DetectionConfig] = None,
                 normalizer: Optional[AudioNormalizer] = None,
                 classifier_factory: Optional[ClassifierFactory] = None,
                 slice_func: SliceFunc = extract_slice):
        """
        Initialize Voice Processor.

        Args:
            config: Detection configuration
            normalizer: Input normalizer (defaults to ``AudioNormalizer(config)``)
            classifier_factory: VAD classifier factory (WebRTC VAD by default)
            slice_func: Slice collaborator used by the extractor
        """
        self.config = config or DetectionConfig()
        self.normalizer = normalizer or AudioNormalizer(self.config)
        self.energy_detector = EnergyRegionDetector(self.config)
        self.vad_detector = VadRegionDetector(self.config, classifier_factory)
        self.slice_func = slice_func

        self.session: Optional[AudioSession] = None
        self._source: Optional[PcmSource] = None
        self._pcm_path: Optional[Path] = None

    def open(self, input_path: str, vad_mode: bool = False) -> AudioSession:
        """
        Normalize an input file and open it for detection.

        Args:
            input_path: Path to the input media file
            vad_mode: Prepare the file for the VAD detector

        Returns:
            The session describing the opened file

        Raises:
            SourceOpenError: If the input or normalized file cannot be opened
            NormalizationError: If the input cannot be converted to PCM
            ValueError: If one detection step is longer than ``max_region_size``
        """
        self.close()

        pcm_path = self.normalizer.normalize(input_path, vad_mode=vad_mode)
        try:
            source = PcmSource(str(pcm_path))
        except Exception:
            pcm_path.unlink(missing_ok=True)
            raise

        self._pcm_path = pcm_path
        self._source = source
        self.session = self._create_session(source, vad_mode)

        logger.info(
            f"Opened {input_path}: {self.session.info.duration:.2f}s, "
            f"{self.session.chunk_count} {'frames' if vad_mode else 'chunks'} "
            f"of {self.session.chunk_duration * 1000:.1f}ms"
        )
        return self.session

    def _create_session(self, source: PcmSource, vad_mode: bool) -> AudioSession:
        info = source.info
        if vad_mode:
            frame_size = self.config.frame_size_at(info.sample_rate)
            chunk_duration = frame_size / info.sample_rate
            chunk_count = info.total_frames // frame_size if frame_size else 0
        else:
            chunk_duration = self.config.chunk_size / info.sample_rate
            chunk_count = math.ceil(info.total_frames / self.config.chunk_size)

        if chunk_duration > self.config.max_region_size:
            raise ValueError(
                f"max_region_size {self.config.max_region_size}s is shorter than one "
                f"{'frame' if vad_mode else 'chunk'} ({chunk_duration:.3f}s)"
            )

        return AudioSession(
            source_path=source.path,
            info=info,
            vad_mode=vad_mode,
            chunk_duration=chunk_duration,
            chunk_count=chunk_count,
        )

    def regions(self) -> List[Region]:
        """
        Detect speech regions in the opened file.

        The detector matches the mode the file was opened with. The source
        is consumed by the scan, so detection runs once per ``open()``.

        Returns:
            Ordered, non-overlapping speech regions
        """
        if self.session is None or self._source is None:
            raise RuntimeError("No audio file is open; call open() first")
        if self._source.closed:
            raise RuntimeError("Audio source was already consumed; call open() again")

        try:
            if self.session.vad_mode:
                frame_size = self.config.frame_size_at(self.session.info.sample_rate)
                return self.vad_detector.detect(self.session, self._source.iter_frames(frame_size))
            return self.energy_detector.detect(
                self.session, self._source.iter_chunks(self.config.chunk_size)
            )
        finally:
            self._source.close()

    def extract(self, regions: List[Region], output_dir: Optional[str] = None,
                progress_callback: Optional[ProgressCallback] = None) -> List[SliceResult]:
        """
        Slice detected regions out of the opened file.

        Args:
            regions: Regions to extract
            output_dir: Directory for slices (defaults to the configured output dir)
            progress_callback: Called with ``(completed, total)`` after each region

        Returns:
            One ``SliceResult`` per region, in input order
        """
        if self._pcm_path is None:
            raise RuntimeError("No audio file is open; call open() first")

        extractor = RegionExtractor(
            self.config,
            slice_func=self.slice_func,
            output_dir=output_dir,
            progress_callback=progress_callback,
        )
        return extractor.extract_regions(str(self._pcm_path), regions)

    def close(self) -> None:
        """Release the source and delete the normalized file."""
        if self._source is not None:
            self._source.close()
            self._source = None
        if self._pcm_path is not None:
            self._pcm_path.unlink(missing_ok=True)
            logger.debug(f"Removed normalized file {self._pcm_path}")
            self._pcm_path = None
        self.session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
