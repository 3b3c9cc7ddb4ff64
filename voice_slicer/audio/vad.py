"""
Voice Activity Detection (VAD) module for identifying speech regions.

Classifies fixed-duration PCM frames with a binary voice activity engine
(WebRTC VAD by default) and grows regions over the active frames.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional, Sequence

import webrtcvad

from ..config import DetectionConfig, VALID_VAD_FRAME_DURATIONS, VALID_VAD_SAMPLE_RATES
from ..errors import ClassifierError, SourceReadError
from ..models import AudioSession, Region
from .regions import RegionGrower


logger = logging.getLogger(__name__)


class FrameClassifier(ABC):
    """Binary speech/non-speech classifier for single PCM frames."""

    @abstractmethod
    def is_speech(self, frame: bytes, sample_rate: int) -> bool:
        """
        Classify one frame of mono 16-bit PCM.

        Raises:
            ClassifierError: If the engine rejects the frame
        """
        pass


class WebRtcClassifier(FrameClassifier):
    """
    WebRTC VAD frame classifier.

    Args:
        mode: Aggressiveness (0-3, higher filters out more non-speech)
        frame_duration_ms: Frame length, one of 10, 20 or 30 ms
    """

    def __init__(self, mode: int = 1, frame_duration_ms: int = 20):
        if mode not in range(4):
            raise ValueError(f"mode must be 0-3, got {mode}")
        if frame_duration_ms not in VALID_VAD_FRAME_DURATIONS:
            raise ValueError(
                f"frame_duration_ms must be one of {VALID_VAD_FRAME_DURATIONS}, "
                f"got {frame_duration_ms}"
            )

        self.mode = mode
        self.frame_duration_ms = frame_duration_ms
        self._vad = webrtcvad.Vad(mode)
        logger.debug(f"WebRTC VAD created (mode={mode}, frame_duration={frame_duration_ms}ms)")

    def is_speech(self, frame: bytes, sample_rate: int) -> bool:
        if sample_rate not in VALID_VAD_SAMPLE_RATES:
            raise ClassifierError(
                f"Unsupported sample rate for WebRTC VAD: {sample_rate}",
                context={'sample_rate': sample_rate},
            )
        try:
            return self._vad.is_speech(frame, sample_rate)
        except Exception as e:
            raise ClassifierError(
                "WebRTC VAD failed to process frame",
                details=str(e),
                context={'sample_rate': sample_rate, 'frame_bytes': len(frame)},
            ) from e


ClassifierFactory = Callable[[DetectionConfig], FrameClassifier]


def default_classifier_factory(config: DetectionConfig) -> FrameClassifier:
    return WebRtcClassifier(config.vad_mode, config.vad_frame_duration_ms)


class VadRegionDetector:
    """
    Region detector driven by per-frame VAD decisions.

    A fresh classifier is created for every detection run since VAD engines
    keep internal state across frames.
    """

    def __init__(self, config: DetectionConfig = None,
                 classifier_factory: Optional[ClassifierFactory] = None):
        """
        Initialize the detector.

        Args:
            config: Detection configuration
            classifier_factory: Builds the classifier for one run (WebRTC VAD by default)
        """
        self.config = config or DetectionConfig()
        self.classifier_factory = classifier_factory or default_classifier_factory

    def detect(self, session: AudioSession, frames: Iterable[bytes]) -> List[Region]:
        """
        Detect speech regions in a frame stream.

        Args:
            session: Session of the file the frames come from
            frames: Mono 16-bit PCM frames of ``config.vad_frame_duration_ms`` each

        Returns:
            Ordered, non-overlapping speech regions

        Raises:
            ClassifierError: If the classifier fails on any frame
            SourceReadError: If reading fails and ``truncate_on_read_error`` is off
        """
        classifier = self.classifier_factory(self.config)
        sample_rate = session.info.sample_rate
        grower = RegionGrower(session.chunk_duration, self.config)

        frame_index = 0
        try:
            for frame in frames:
                try:
                    active = classifier.is_speech(frame, sample_rate)
                except ClassifierError as e:
                    e.processing_error.context['frame_index'] = frame_index
                    logger.error(f"VAD failed on frame {frame_index}, aborting detection: {e}")
                    raise
                grower.feed(active)
                frame_index += 1
        except SourceReadError as e:
            if not self.config.truncate_on_read_error:
                raise
            logger.warning(f"Read error after {frame_index} frames, truncating scan: {e}")

        regions = grower.finish()
        logger.info(
            f"VAD detector found {len(regions)} regions in "
            f"{frame_index} frames of {session.source_path}"
        )
        return regions

    def detect_from_decisions(self, decisions: Sequence[bool],
                              chunk_duration: float) -> List[Region]:
        """Grow regions over precomputed frame decisions."""
        return RegionGrower(chunk_duration, self.config).feed_all(decisions)
