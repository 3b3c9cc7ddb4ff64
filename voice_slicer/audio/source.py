"""
PCM sample source.

Reads a normalized PCM file sequentially, either as fixed-size sample
chunks for energy analysis or as fixed-size 16-bit frames for VAD.
"""

import logging
from pathlib import Path
from typing import Iterator

import numpy as np
import soundfile as sf

from ..errors import SourceOpenError, SourceReadError
from ..models import AudioInfo


logger = logging.getLogger(__name__)

# Bits per sample for the PCM subtypes soundfile reports
SUBTYPE_BITS = {
    'PCM_S8': 8,
    'PCM_U8': 8,
    'PCM_16': 16,
    'PCM_24': 24,
    'PCM_32': 32,
    'FLOAT': 32,
    'DOUBLE': 64,
}


class PcmSource:
    """Sequential reader over a PCM audio file."""

    def __init__(self, file_path: str):
        """
        Open a PCM file.

        Args:
            file_path: Path to the PCM file

        Raises:
            SourceOpenError: If the file is missing or cannot be decoded
        """
        self.path = Path(file_path)

        if not self.path.is_file():
            raise SourceOpenError(
                "Audio file not found",
                details=f"The audio file does not exist: {file_path}",
                context={'path': str(file_path)},
            )

        try:
            self._file = sf.SoundFile(str(self.path))
        except (sf.SoundFileError, RuntimeError) as e:
            raise SourceOpenError(
                "Failed to open audio file",
                details=f"{self.path}: {e}",
                context={'path': str(self.path)},
            ) from e

        self.info = AudioInfo(
            sample_rate=self._file.samplerate,
            channels=self._file.channels,
            sample_width=SUBTYPE_BITS.get(self._file.subtype, 16),
            total_frames=self._file.frames,
        )
        logger.debug(
            f"Opened {self.path.name}: {self.info.sample_rate}Hz, "
            f"{self.info.channels}ch, {self.info.sample_width}bit, "
            f"{self.info.total_frames} frames"
        )

    @property
    def closed(self) -> bool:
        return self._file.closed

    def _read(self, frames: int, dtype: str) -> np.ndarray:
        try:
            return self._file.read(frames, dtype=dtype, always_2d=True)
        except (sf.SoundFileError, RuntimeError) as e:
            raise SourceReadError(
                "Failed to read audio samples",
                details=f"{self.path} at frame {self._file.tell()}: {e}",
                context={'path': str(self.path)},
            ) from e

    def iter_chunks(self, chunk_size: int) -> Iterator[np.ndarray]:
        """
        Yield consecutive chunks of float samples shaped (frames, channels).

        The last chunk may be shorter. Exhaustion means end of stream; a
        failed read raises ``SourceReadError`` instead.
        """
        while True:
            block = self._read(chunk_size, 'float64')
            if len(block) == 0:
                return
            yield block

    def iter_frames(self, frame_size: int) -> Iterator[bytes]:
        """
        Yield consecutive mono 16-bit PCM frames of ``frame_size`` samples.

        Multi-channel audio is averaged down to mono. A trailing partial
        frame is dropped because VAD engines only accept whole frames.
        """
        while True:
            block = self._read(frame_size, 'int16')
            if len(block) < frame_size:
                return
            if block.shape[1] > 1:
                block = block.mean(axis=1).astype(np.int16)
            else:
                block = block[:, 0]
            yield np.ascontiguousarray(block).tobytes()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
