"""
Slice extraction from PCM files.

Cuts the frames of a time range out of a PCM file and stores them as a
standalone 16-bit WAV file.
"""

import logging
from pathlib import Path

import numpy as np
import scipy.io.wavfile as wavfile
import soundfile as sf

from ..errors import ExtractionError


logger = logging.getLogger(__name__)


def slice_filename(source_path: Path, start: float, end: float) -> str:
    """Output file name for a slice, unique per time range."""
    return f"{source_path.stem}_{int(round(start * 1000)):08d}_{int(round(end * 1000)):08d}.wav"


def extract_slice(start: float, end: float, source_path: str, output_dir: str) -> Path:
    """
    Extract the range ``[start, end)`` of a PCM file into a WAV file.

    Args:
        start: Start time in seconds
        end: End time in seconds
        source_path: Path to the PCM file
        output_dir: Directory to save the slice

    Returns:
        Path to the saved slice

    Raises:
        ExtractionError: If the range is invalid or reading/writing fails
    """
    source = Path(source_path)
    context = {'path': str(source), 'start': start, 'end': end}

    if end <= start:
        raise ExtractionError(
            "Invalid slice boundaries",
            details=f"{start:.3f}s-{end:.3f}s",
            context=context,
        )

    output = Path(output_dir)
    try:
        output.mkdir(parents=True, exist_ok=True)

        with sf.SoundFile(str(source)) as f:
            sample_rate = f.samplerate
            start_frame = max(0, int(start * sample_rate))
            end_frame = min(f.frames, int(end * sample_rate))
            if end_frame <= start_frame:
                raise ExtractionError(
                    "Slice lies outside the audio file",
                    details=f"{start:.3f}s-{end:.3f}s exceeds {f.frames / sample_rate:.3f}s",
                    context=context,
                )
            f.seek(start_frame)
            segment_audio = f.read(end_frame - start_frame, dtype='int16')

        filepath = output / slice_filename(source, start, end)
        wavfile.write(str(filepath), sample_rate, np.ascontiguousarray(segment_audio))
    except ExtractionError:
        raise
    except (sf.SoundFileError, RuntimeError, OSError, ValueError) as e:
        raise ExtractionError(
            "Failed to extract slice",
            details=f"{source} {start:.3f}s-{end:.3f}s: {e}",
            context=context,
        ) from e

    logger.debug(f"Extracted {start:.3f}-{end:.3f}s -> {filepath.name}")
    return filepath
