"""
Tests for the PCM sample source.
"""

import numpy as np
import pytest
import soundfile as sf

from voice_slicer.audio.source import PcmSource
from voice_slicer.errors import SourceOpenError


class TestPcmSource:
    """Test cases for PcmSource."""

    def test_info(self, burst_wav):
        with PcmSource(str(burst_wav)) as source:
            assert source.info.sample_rate == 16000
            assert source.info.channels == 1
            assert source.info.sample_width == 16
            assert source.info.total_frames == 104000
            assert source.info.duration == pytest.approx(6.5)

    def test_iter_chunks(self, burst_wav):
        with PcmSource(str(burst_wav)) as source:
            chunks = list(source.iter_chunks(4096))

        assert len(chunks) == 26
        assert all(chunk.shape == (4096, 1) for chunk in chunks[:-1])
        assert chunks[-1].shape == (104000 - 25 * 4096, 1)
        # First chunk is silence, the fifth lies inside the first tone
        assert np.all(chunks[0] == 0.0)
        assert np.max(np.abs(chunks[5])) > 0.4

    def test_iter_chunks_keeps_channels(self, stereo_wav):
        with PcmSource(str(stereo_wav)) as source:
            chunk = next(source.iter_chunks(1024))
        assert chunk.shape == (1024, 2)

    def test_iter_frames(self, burst_wav):
        with PcmSource(str(burst_wav)) as source:
            frames = list(source.iter_frames(320))

        assert len(frames) == 325
        assert all(len(frame) == 640 for frame in frames)
        assert frames[0] == b"\x00\x00" * 320

    def test_iter_frames_drops_partial_frame(self, tmp_path):
        path = tmp_path / "odd.wav"
        sf.write(str(path), np.zeros(1000), 16000, subtype='PCM_16')

        with PcmSource(str(path)) as source:
            frames = list(source.iter_frames(320))

        assert len(frames) == 3

    def test_iter_frames_downmixes_stereo(self, stereo_wav):
        with PcmSource(str(stereo_wav)) as source:
            frames = list(source.iter_frames(320))
        assert all(len(frame) == 640 for frame in frames)
        assert len(frames) == 4 * 16000 // 320

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceOpenError) as exc_info:
            PcmSource(str(tmp_path / "missing.wav"))
        assert exc_info.value.processing_error.error_code == "SRC_001"

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "broken.wav"
        path.write_text("this is not audio")
        with pytest.raises(SourceOpenError):
            PcmSource(str(path))

    def test_close(self, burst_wav):
        source = PcmSource(str(burst_wav))
        assert not source.closed
        source.close()
        assert source.closed
        source.close()
