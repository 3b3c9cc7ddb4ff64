"""
Tests for VAD-driven region detection.
"""

from pathlib import Path

import pytest

from voice_slicer.audio.vad import FrameClassifier, VadRegionDetector, WebRtcClassifier
from voice_slicer.config import DetectionConfig
from voice_slicer.errors import ClassifierError, SourceReadError
from voice_slicer.models import AudioInfo, AudioSession


FRAME_BYTES = b"\x00\x00" * 320  # 20 ms of 16 kHz mono


class ScriptedClassifier(FrameClassifier):
    """Replays a fixed list of decisions; fails at ``fail_at`` if given."""

    def __init__(self, decisions, fail_at=None):
        self.decisions = list(decisions)
        self.fail_at = fail_at
        self.calls = 0

    def is_speech(self, frame, sample_rate):
        index = self.calls
        self.calls += 1
        if index == self.fail_at:
            raise ClassifierError("engine failure")
        return self.decisions[index]


def make_session(chunk_duration=0.02, sample_rate=16000):
    info = AudioInfo(sample_rate=sample_rate, channels=1, sample_width=16, total_frames=0)
    return AudioSession(Path("test.wav"), info, vad_mode=True,
                        chunk_duration=chunk_duration, chunk_count=0)


def detector_for(classifier, config=None):
    return VadRegionDetector(config or DetectionConfig(), classifier_factory=lambda cfg: classifier)


class TestVadScenarios:
    """Test cases for documented VAD scenarios."""

    def test_all_active_stream_drops_trailing_region(self):
        """10s of speech: one region force-closed at 6s, the open tail is dropped."""
        frame_count = 500
        classifier = ScriptedClassifier([True] * frame_count)
        detector = detector_for(classifier)

        regions = detector.detect(make_session(), [FRAME_BYTES] * frame_count)

        assert len(regions) == 1
        assert regions[0].start == 0.0
        assert regions[0].end == pytest.approx(6.0)
        assert classifier.calls == frame_count

    def test_all_active_stream_with_flush(self):
        frame_count = 500
        config = DetectionConfig(flush_open_region_at_end=True)
        detector = detector_for(ScriptedClassifier([True] * frame_count), config)

        regions = detector.detect(make_session(), [FRAME_BYTES] * frame_count)

        assert len(regions) == 2
        assert regions[0].end == pytest.approx(6.0)
        assert regions[1].start == pytest.approx(6.02)
        assert regions[1].end == pytest.approx(10.0)

    def test_speech_between_silence(self):
        decisions = [False] * 50 + [True] * 100 + [False] * 50
        detector = detector_for(ScriptedClassifier(decisions))

        regions = detector.detect(make_session(), [FRAME_BYTES] * len(decisions))

        assert len(regions) == 1
        assert regions[0].start == pytest.approx(1.0)
        assert regions[0].end == pytest.approx(3.0)

    def test_detect_from_decisions_matches_detect(self):
        decisions = ([False] * 10 + [True] * 40) * 4 + [False]
        detector = detector_for(ScriptedClassifier(decisions))

        streamed = detector.detect(make_session(), [FRAME_BYTES] * len(decisions))
        precomputed = detector.detect_from_decisions(decisions, 0.02)

        assert streamed == precomputed
        assert len(streamed) == 4

    def test_classifier_created_per_run(self):
        created = []

        def factory(config):
            classifier = ScriptedClassifier([False] * 5)
            created.append(classifier)
            return classifier

        detector = VadRegionDetector(DetectionConfig(), classifier_factory=factory)
        detector.detect(make_session(), [FRAME_BYTES] * 5)
        detector.detect(make_session(), [FRAME_BYTES] * 5)

        assert len(created) == 2


class TestVadFailures:
    """Test cases for classifier and read failures."""

    def test_classifier_error_aborts_detection(self):
        classifier = ScriptedClassifier([True] * 100, fail_at=40)
        detector = detector_for(classifier)

        with pytest.raises(ClassifierError) as exc_info:
            detector.detect(make_session(), [FRAME_BYTES] * 100)

        assert classifier.calls == 41
        assert exc_info.value.processing_error.context['frame_index'] == 40
        assert exc_info.value.processing_error.error_code == "VAD_001"

    @staticmethod
    def failing_frames(count):
        for _ in range(count):
            yield FRAME_BYTES
        raise SourceReadError("truncated stream")

    def test_read_error_propagates_by_default(self):
        detector = detector_for(ScriptedClassifier([True] * 10))
        with pytest.raises(SourceReadError):
            detector.detect(make_session(), self.failing_frames(10))

    def test_read_error_truncates_when_configured(self):
        decisions = [False] * 10 + [True] * 50 + [False] * 10
        config = DetectionConfig(truncate_on_read_error=True)
        detector = detector_for(ScriptedClassifier(decisions), config)

        regions = detector.detect(make_session(), self.failing_frames(len(decisions)))

        assert len(regions) == 1
        assert regions[0].start == pytest.approx(0.2)
        assert regions[0].end == pytest.approx(1.2)


class TestWebRtcClassifier:
    """Test cases for the WebRTC VAD classifier."""

    def test_silence_is_not_speech(self):
        classifier = WebRtcClassifier(mode=1, frame_duration_ms=20)
        assert classifier.is_speech(FRAME_BYTES, 16000) is False

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            WebRtcClassifier(mode=5)

    def test_invalid_frame_duration(self):
        with pytest.raises(ValueError):
            WebRtcClassifier(frame_duration_ms=25)

    def test_unsupported_sample_rate(self):
        classifier = WebRtcClassifier()
        with pytest.raises(ClassifierError):
            classifier.is_speech(FRAME_BYTES, 22050)

    def test_wrong_frame_length(self):
        classifier = WebRtcClassifier()
        with pytest.raises(ClassifierError):
            classifier.is_speech(b"\x00\x00" * 123, 16000)
