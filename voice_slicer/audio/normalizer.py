"""
Audio normalization into PCM WAV files.

Decodes any format librosa can read into a temporary 16-bit PCM WAV that
the detectors consume. VAD mode additionally forces mono audio at the
sample rate the VAD engine expects.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import librosa
import numpy as np
import soundfile as sf

from ..config import Config, DetectionConfig
from ..errors import NormalizationError, SourceOpenError


logger = logging.getLogger(__name__)


class AudioNormalizer:
    """Converts input media into normalized PCM files."""

    def __init__(self, config: Optional[DetectionConfig] = None):
        """
        Initialize AudioNormalizer.

        Args:
            config: Detection configuration (temp directory and VAD sample rate)
        """
        self.config = config or DetectionConfig()

    def validate_file_path(self, file_path: str) -> Path:
        """
        Validate that the input file exists and has a supported format.

        Raises:
            SourceOpenError: If the file doesn't exist or the format is not supported
        """
        path = Path(file_path)

        if not path.is_file():
            raise SourceOpenError(
                "Audio file not found",
                details=f"The specified audio file does not exist: {file_path}",
                context={'path': str(file_path)},
            )

        if path.suffix.lower() not in Config.AUDIO_FORMATS:
            supported = ', '.join(Config.AUDIO_FORMATS)
            raise SourceOpenError(
                f"Unsupported audio format: {path.suffix}",
                details=f"Supported formats: {supported}",
                context={'path': str(file_path)},
            )

        return path

    def normalize(self, input_path: str, vad_mode: bool = False) -> Path:
        """
        Decode an input file into a temporary PCM WAV.

        Args:
            input_path: Path to the input media file
            vad_mode: Produce mono audio at the VAD sample rate

        Returns:
            Path to the normalized WAV; the caller owns and deletes it

        Raises:
            SourceOpenError: If the input file is missing or unsupported
            NormalizationError: If decoding or writing fails
        """
        path = self.validate_file_path(input_path)
        target_rate = self.config.vad_sample_rate if vad_mode else None

        output_path = self._create_temp_path(path)
        try:
            audio_data, sample_rate = librosa.load(
                str(path),
                sr=target_rate,
                mono=vad_mode,
            )

            # librosa returns (channels, samples) for multi-channel audio
            if audio_data.ndim > 1:
                audio_data = audio_data.T

            sf.write(
                str(output_path),
                np.clip(audio_data, -1.0, 1.0),
                sample_rate,
                subtype='PCM_16',
            )
        except Exception as e:
            output_path.unlink(missing_ok=True)
            raise NormalizationError(
                "Failed to normalize audio file",
                details=f"{path}: {e}",
                context={'path': str(path), 'vad_mode': vad_mode},
            ) from e

        logger.info(
            f"Normalized {path.name} -> {output_path.name} "
            f"({sample_rate}Hz, vad_mode={vad_mode})"
        )
        return output_path

    def _create_temp_path(self, source: Path) -> Path:
        temp_dir = self.config.temp_dir
        if temp_dir is not None:
            temp_dir.mkdir(parents=True, exist_ok=True)

        fd, name = tempfile.mkstemp(
            prefix=f"{source.stem}_",
            suffix=".wav",
            dir=str(temp_dir) if temp_dir is not None else None,
        )
        os.close(fd)
        return Path(name)
